from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Resident


class IResidentRepository(ABC):
    """Resident repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, resident_id: UUID) -> Optional[Resident]:
        """Get resident by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, resident_ids: List[UUID]) -> List[Resident]:
        """Get residents by IDs"""
        pass
