from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import VisitVisitor


class IVisitVisitorRepository(ABC):
    """VisitVisitor repository interface - application layer"""

    @abstractmethod
    async def get_by_visit(self, visit_id: UUID) -> List[VisitVisitor]:
        """Get all visitor rows of a visit"""
        pass

    @abstractmethod
    async def get(self, visit_id: UUID, visitor_id: UUID) -> Optional[VisitVisitor]:
        """Get one visitor row of a visit"""
        pass

    @abstractmethod
    async def create(self, link: VisitVisitor) -> VisitVisitor:
        """Create a new visitor row"""
        pass

    @abstractmethod
    async def update(self, link: VisitVisitor) -> VisitVisitor:
        """Update existing visitor row"""
        pass
