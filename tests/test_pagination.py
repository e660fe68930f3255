import pytest

from app.utils.pagination import paginate


def test_partial_last_page():
    p = paginate(total=45, page=3, limit=20)
    assert p.total_pages == 3
    assert p.has_next is False
    assert p.has_prev is True


def test_first_page():
    p = paginate(total=45, page=1, limit=20)
    assert p.current_page == 1
    assert p.has_next is True
    assert p.has_prev is False


def test_exact_multiple():
    assert paginate(total=40, page=1, limit=20).total_pages == 2


def test_empty_result():
    p = paginate(total=0, page=1, limit=20)
    assert p.total_pages == 0
    assert p.total_items == 0
    assert p.has_next is False
    assert p.has_prev is False


def test_page_past_the_end():
    # nothing to show, but the client can still go back
    p = paginate(total=5, page=4, limit=20)
    assert p.has_next is False
    assert p.has_prev is True


def test_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        paginate(total=10, page=1, limit=0)
