import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.building_repository import BuildingRepository
from src.adapter.repositories.resident_repository import ResidentRepository
from src.adapter.repositories.visit_log_repository import VisitLogRepository
from src.adapter.repositories.visit_repository import VisitRepository
from src.adapter.repositories.visit_visitor_repository import VisitVisitorRepository
from src.adapter.repositories.visitor_ban_repository import VisitorBanRepository
from src.adapter.repositories.visitor_repository import VisitorRepository
from src.app.services.unit_of_work import StorageError, UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.buildings = BuildingRepository(self.session)
        self.residents = ResidentRepository(self.session)
        self.visitors = VisitorRepository(self.session)
        self.visits = VisitRepository(self.session)
        self.visit_visitors = VisitVisitorRepository(self.session)
        self.visitor_bans = VisitorBanRepository(self.session)
        self.visit_logs = VisitLogRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        # Anything not committed is discarded, success or failure
        await self.rollback()
        if isinstance(exc, SQLAlchemyError):
            logger.error("Transaction rolled back after storage failure: %s", exc)
            raise StorageError("Storage operation failed") from exc

    async def commit(self):
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.error("Commit failed: %s", exc)
            raise StorageError("Failed to commit transaction") from exc

    async def rollback(self):
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to roll back transaction") from exc
