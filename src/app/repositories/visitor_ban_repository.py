from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import VisitorBan


class IVisitorBanRepository(ABC):
    """VisitorBan repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, ban_id: UUID) -> Optional[VisitorBan]:
        """Get ban by ID"""
        pass

    @abstractmethod
    async def get_active_for_phone(
        self, building_id: UUID, phone: str
    ) -> List[VisitorBan]:
        """Get every active ban on a phone in a building (any owner)"""
        pass

    @abstractmethod
    async def get_active_by_owner_and_phone(
        self, building_id: UUID, user_id: Optional[UUID], phone: str
    ) -> Optional[VisitorBan]:
        """Get the active ban of one owner (None = building-wide) on a phone"""
        pass

    @abstractmethod
    async def get_active_by_owner(
        self, building_id: UUID, user_id: Optional[UUID]
    ) -> List[VisitorBan]:
        """Get active bans of one owner"""
        pass

    @abstractmethod
    async def get_active_expired(self, now: datetime) -> List[VisitorBan]:
        """Get bans still flagged active whose expires_at has passed"""
        pass

    @abstractmethod
    async def create(self, ban: VisitorBan) -> VisitorBan:
        """Create a new ban"""
        pass

    @abstractmethod
    async def update(self, ban: VisitorBan) -> VisitorBan:
        """Update existing ban"""
        pass
