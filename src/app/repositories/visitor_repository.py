from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Visitor


class IVisitorRepository(ABC):
    """Visitor repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, visitor_id: UUID) -> Optional[Visitor]:
        """Get visitor by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, visitor_ids: List[UUID]) -> List[Visitor]:
        """Get visitors by IDs"""
        pass

    @abstractmethod
    async def get_by_building_and_phone(
        self, building_id: UUID, phone: str
    ) -> Optional[Visitor]:
        """Get visitor by building and normalized phone"""
        pass

    @abstractmethod
    async def create(self, visitor: Visitor) -> Visitor:
        """Create a new visitor"""
        pass

    @abstractmethod
    async def update(self, visitor: Visitor) -> Visitor:
        """Update existing visitor"""
        pass
