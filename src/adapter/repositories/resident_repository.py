from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.resident_repository import IResidentRepository
from src.domain.entities import Resident


class ResidentRepository(IResidentRepository):
    """Resident repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, resident_id: UUID) -> Optional[Resident]:
        """Get resident by ID"""
        stmt = select(Resident).where(Resident.id == resident_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, resident_ids: List[UUID]) -> List[Resident]:
        """Get residents by IDs"""
        if not resident_ids:
            return []
        stmt = select(Resident).where(Resident.id.in_(resident_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
