from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import ScanAction, Visit


class IVisitRepository(ABC):
    """Visit repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, visit_id: UUID, for_update: bool = False) -> Optional[Visit]:
        """Get visit by ID, optionally locking the row for the transaction"""
        pass

    @abstractmethod
    async def get_by_qr_code(self, qr_code: str, for_update: bool = False) -> Optional[Visit]:
        """Get visit by QR code, optionally locking the row for the transaction"""
        pass

    @abstractmethod
    async def qr_code_exists(self, qr_code: str) -> bool:
        """Check the unique QR code index"""
        pass

    @abstractmethod
    async def claim_scan(self, visit_id: UUID, action: ScanAction) -> bool:
        """Compare-and-set the entry or exit flag; False if already set"""
        pass

    @abstractmethod
    async def get_open_started_before(self, cutoff: datetime) -> List[Visit]:
        """Get pending/confirmed, never-entered visits with expected_start < cutoff (locked)"""
        pass

    @abstractmethod
    async def create(self, visit: Visit) -> Visit:
        """Create a new visit"""
        pass

    @abstractmethod
    async def update(self, visit: Visit) -> Visit:
        """Update existing visit"""
        pass
