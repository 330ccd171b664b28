from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.visit_log_repository import IVisitLogRepository
from src.domain.entities import VisitLog


class VisitLogRepository(IVisitLogRepository):
    """VisitLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, log: VisitLog) -> VisitLog:
        """Append an immutable scan record"""
        self.session.add(log)
        await self.session.flush()
        await self.session.refresh(log)
        return log

    async def get_by_visit(self, visit_id: UUID) -> List[VisitLog]:
        """Get scan records of a visit, oldest first"""
        stmt = (
            select(VisitLog)
            .where(VisitLog.visit_id == visit_id)
            .order_by(VisitLog.scanned_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
