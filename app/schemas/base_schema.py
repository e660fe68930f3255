# app/schemas/base_schema.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every API schema: snake_case in Python, camelCase on the wire.
    FastAPI serializes response models by alias, so responses come out camelCase.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageOut(CamelModel):
    message: str
