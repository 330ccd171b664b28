from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import VisitLog


class IVisitLogRepository(ABC):
    """VisitLog repository interface - application layer"""

    @abstractmethod
    async def create(self, log: VisitLog) -> VisitLog:
        """Append an immutable scan record"""
        pass

    @abstractmethod
    async def get_by_visit(self, visit_id: UUID) -> List[VisitLog]:
        """Get scan records of a visit, oldest first"""
        pass
