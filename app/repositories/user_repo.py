# app/repositories/user_repo.py
# Database access for users and tenants
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql.expression import and_, or_

from app.models.tenant import Tenant
from app.models.user import User, UserRoleEnum


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: str) -> User | None:
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_active_tenant(self, tenant_id: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.id == tenant_id, Tenant.active.is_(True))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_alert_recipient_ids(self, tenant_id: Optional[str]) -> List[str]:
        """
        Active users that should be told about an alert:
        every SUPERADMIN, plus the tenant's ADMIN / TENANT_ADMIN users for tenant alerts.
        """
        audience = User.role == UserRoleEnum.superadmin
        if tenant_id:
            audience = or_(
                audience,
                and_(
                    User.tenant_id == tenant_id,
                    User.role.in_([UserRoleEnum.admin, UserRoleEnum.tenant_admin]),
                ),
            )

        stmt = select(User.id).where(User.active.is_(True), audience)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
