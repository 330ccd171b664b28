from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.visit_repository import IVisitRepository
from src.domain.entities import OPEN_VISIT_STATUSES, ScanAction, Visit


class VisitRepository(IVisitRepository):
    """Visit repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _locked(self, stmt, for_update: bool):
        # FOR UPDATE is a no-op on SQLite, where the engine opens every
        # transaction with BEGIN IMMEDIATE instead
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return stmt

    async def get_by_id(self, visit_id: UUID, for_update: bool = False) -> Optional[Visit]:
        """Get visit by ID"""
        stmt = self._locked(select(Visit).where(Visit.id == visit_id), for_update)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_qr_code(self, qr_code: str, for_update: bool = False) -> Optional[Visit]:
        """Get visit by QR code"""
        stmt = self._locked(select(Visit).where(Visit.qr_code == qr_code), for_update)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def qr_code_exists(self, qr_code: str) -> bool:
        """Check the unique QR code index"""
        stmt = select(Visit.id).where(Visit.qr_code == qr_code)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def claim_scan(self, visit_id: UUID, action: ScanAction) -> bool:
        """
        Compare-and-set the entry or exit flag.

        Returns False when another transaction already flipped it.
        """
        stmt = update(Visit).where(Visit.id == visit_id, Visit.exit == False)
        if action == ScanAction.entry:
            stmt = stmt.where(Visit.entry == False).values(entry=True)
        else:
            stmt = stmt.where(Visit.entry == True).values(exit=True)
        stmt = stmt.execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def get_open_started_before(self, cutoff: datetime) -> List[Visit]:
        """Get never-entered pending/confirmed visits scheduled before cutoff"""
        stmt = self._locked(
            select(Visit).where(
                Visit.status.in_(list(OPEN_VISIT_STATUSES)),
                Visit.entry == False,
                Visit.expected_start < cutoff,
            ),
            True,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, visit: Visit) -> Visit:
        """Create a new visit"""
        self.session.add(visit)
        await self.session.flush()
        await self.session.refresh(visit)
        return visit

    async def update(self, visit: Visit) -> Visit:
        """Update existing visit"""
        self.session.add(visit)
        await self.session.flush()
        await self.session.refresh(visit)
        return visit
