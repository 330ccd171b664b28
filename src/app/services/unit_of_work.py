from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.building_repository import IBuildingRepository
from src.app.repositories.resident_repository import IResidentRepository
from src.app.repositories.visit_log_repository import IVisitLogRepository
from src.app.repositories.visit_repository import IVisitRepository
from src.app.repositories.visit_visitor_repository import IVisitVisitorRepository
from src.app.repositories.visitor_ban_repository import IVisitorBanRepository
from src.app.repositories.visitor_repository import IVisitorRepository


class StorageError(Exception):
    """Raised when the backing store fails; the transaction has been rolled back"""


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    buildings: IBuildingRepository
    residents: IResidentRepository
    visitors: IVisitorRepository
    visits: IVisitRepository
    visit_visitors: IVisitVisitorRepository
    visitor_bans: IVisitorBanRepository
    visit_logs: IVisitLogRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
