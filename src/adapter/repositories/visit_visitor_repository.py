from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.visit_visitor_repository import IVisitVisitorRepository
from src.domain.entities import VisitVisitor


class VisitVisitorRepository(IVisitVisitorRepository):
    """VisitVisitor repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_visit(self, visit_id: UUID) -> List[VisitVisitor]:
        """Get all visitor rows of a visit"""
        stmt = (
            select(VisitVisitor)
            .where(VisitVisitor.visit_id == visit_id)
            .order_by(VisitVisitor.added_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, visit_id: UUID, visitor_id: UUID) -> Optional[VisitVisitor]:
        """Get one visitor row of a visit"""
        stmt = select(VisitVisitor).where(
            VisitVisitor.visit_id == visit_id, VisitVisitor.visitor_id == visitor_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, link: VisitVisitor) -> VisitVisitor:
        """Create a new visitor row"""
        self.session.add(link)
        await self.session.flush()
        await self.session.refresh(link)
        return link

    async def update(self, link: VisitVisitor) -> VisitVisitor:
        """Update existing visitor row"""
        self.session.add(link)
        await self.session.flush()
        await self.session.refresh(link)
        return link
