# app/repositories/contact_repo.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Iterable, Optional, Set

from app.models.contact import Category, Contact
from app.models.tenant import TenantSettings


class ContactRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_tenant_settings(self, tenant_id: str) -> Optional[TenantSettings]:
        stmt = select(TenantSettings).where(TenantSettings.tenant_id == tenant_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_existing_category_ids(self, tenant_id: str, category_ids: Iterable[str]) -> Set[str]:
        stmt = select(Category.id).where(Category.tenant_id == tenant_id, Category.id.in_(list(category_ids)))
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def get_contact_by_phone(self, tenant_id: str, phone: str) -> Optional[Contact]:
        stmt = select(Contact).where(Contact.tenant_id == tenant_id, Contact.phone == phone)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    def add_contact(self, contact: Contact) -> None:
        """Stage a new contact; written on the next flush/commit"""
        self.db.add(contact)

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
