from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.visitor_ban_repository import IVisitorBanRepository
from src.domain.entities import VisitorBan


class VisitorBanRepository(IVisitorBanRepository):
    """VisitorBan repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, ban_id: UUID) -> Optional[VisitorBan]:
        """Get ban by ID"""
        stmt = select(VisitorBan).where(VisitorBan.id == ban_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_for_phone(
        self, building_id: UUID, phone: str
    ) -> List[VisitorBan]:
        """Get every active ban on a phone in a building (any owner)"""
        stmt = (
            select(VisitorBan)
            .where(
                VisitorBan.building_id == building_id,
                VisitorBan.phone == phone,
                VisitorBan.is_active == True,
            )
            .order_by(VisitorBan.banned_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_by_owner_and_phone(
        self, building_id: UUID, user_id: Optional[UUID], phone: str
    ) -> Optional[VisitorBan]:
        """Get the active ban of one owner (None = building-wide) on a phone"""
        owner = VisitorBan.user_id.is_(None) if user_id is None else VisitorBan.user_id == user_id
        stmt = select(VisitorBan).where(
            VisitorBan.building_id == building_id,
            VisitorBan.phone == phone,
            VisitorBan.is_active == True,
            owner,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_active_by_owner(
        self, building_id: UUID, user_id: Optional[UUID]
    ) -> List[VisitorBan]:
        """Get active bans of one owner, newest first"""
        owner = VisitorBan.user_id.is_(None) if user_id is None else VisitorBan.user_id == user_id
        stmt = (
            select(VisitorBan)
            .where(
                VisitorBan.building_id == building_id,
                VisitorBan.is_active == True,
                owner,
            )
            .order_by(VisitorBan.banned_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_expired(self, now: datetime) -> List[VisitorBan]:
        """Get bans still flagged active whose expires_at has passed"""
        stmt = select(VisitorBan).where(
            VisitorBan.is_active == True,
            VisitorBan.expires_at.is_not(None),
            VisitorBan.expires_at <= now,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, ban: VisitorBan) -> VisitorBan:
        """Create a new ban"""
        self.session.add(ban)
        await self.session.flush()
        await self.session.refresh(ban)
        return ban

    async def update(self, ban: VisitorBan) -> VisitorBan:
        """Update existing ban"""
        self.session.add(ban)
        await self.session.flush()
        await self.session.refresh(ban)
        return ban
