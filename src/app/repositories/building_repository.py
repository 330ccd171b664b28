from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Building


class IBuildingRepository(ABC):
    """Building repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, building_id: UUID) -> Optional[Building]:
        """Get building by ID"""
        pass

    @abstractmethod
    async def try_reserve_license(self, building_id: UUID) -> bool:
        """
        Atomically consume one license if capacity remains.

        Returns False when used_licenses has reached total_licenses.
        """
        pass

    @abstractmethod
    async def release_license(self, building_id: UUID) -> bool:
        """Return one license to the pool (never below zero)"""
        pass
