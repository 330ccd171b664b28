from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.building_repository import IBuildingRepository
from src.domain.entities import Building


class BuildingRepository(IBuildingRepository):
    """Building repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, building_id: UUID) -> Optional[Building]:
        """Get building by ID"""
        stmt = select(Building).where(Building.id == building_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def try_reserve_license(self, building_id: UUID) -> bool:
        """
        Check-and-increment in a single statement.

        The WHERE clause is evaluated under the row's write lock, so two
        concurrent reservations can never both see the last free license.
        """
        stmt = (
            update(Building)
            .where(
                Building.id == building_id,
                Building.used_licenses < Building.total_licenses,
            )
            .values(used_licenses=Building.used_licenses + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release_license(self, building_id: UUID) -> bool:
        """Conditional decrement, never below zero"""
        stmt = (
            update(Building)
            .where(Building.id == building_id, Building.used_licenses > 0)
            .values(used_licenses=Building.used_licenses - 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
