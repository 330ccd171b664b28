from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.visitor_repository import IVisitorRepository
from src.domain.entities import Visitor


class VisitorRepository(IVisitorRepository):
    """Visitor repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, visitor_id: UUID) -> Optional[Visitor]:
        """Get visitor by ID"""
        stmt = select(Visitor).where(Visitor.id == visitor_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, visitor_ids: List[UUID]) -> List[Visitor]:
        """Get visitors by IDs"""
        if not visitor_ids:
            return []
        stmt = select(Visitor).where(Visitor.id.in_(visitor_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_building_and_phone(
        self, building_id: UUID, phone: str
    ) -> Optional[Visitor]:
        """Get visitor by building and normalized phone"""
        stmt = select(Visitor).where(
            Visitor.building_id == building_id, Visitor.phone == phone
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, visitor: Visitor) -> Visitor:
        """Create a new visitor"""
        self.session.add(visitor)
        await self.session.flush()
        await self.session.refresh(visitor)
        return visitor

    async def update(self, visitor: Visitor) -> Visitor:
        """Update existing visitor"""
        self.session.add(visitor)
        await self.session.flush()
        await self.session.refresh(visitor)
        return visitor
