# app/schemas/user_schema.py
from pydantic import BaseModel, ConfigDict
from typing import Optional

from app.models.user import UserRoleEnum


# Claims carried by the bearer token
class TokenData(BaseModel):
    user_id: str
    tenant_id: Optional[str] = None


class CurrentUser(BaseModel):
    """
    The authenticated requester as seen by the routers.
    Only `id` is used as the ownership key; tenant_id and role give context.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    tenant_id: Optional[str] = None
    role: UserRoleEnum
