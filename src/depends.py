from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.database import create_engine, create_session_factory
from src.adapter.services.event_bus import InProcessEventBus
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.event_publisher import IEventPublisher
from src.app.services.qr_code_issuer import QrCodeIssuer
from src.domain.entities import UserRole
from src.domain.errors import ErrorCode
from src.domain.principal import Principal

engine = create_engine(
    ApplicationConfig.DB_URI, busy_timeout=ApplicationConfig.SQLITE_BUSY_TIMEOUT_SECONDS
)

AsyncSessionLocal = create_session_factory(engine)

event_bus = InProcessEventBus()

qr_code_issuer = QrCodeIssuer.from_config(ApplicationConfig)

security = HTTPBearer()


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_event_publisher() -> IEventPublisher:
    return event_bus


def get_qr_code_issuer() -> QrCodeIssuer:
    return qr_code_issuer


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id, role, building_id

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload


async def get_current_principal(current_user: dict = Depends(get_current_user)) -> Principal:
    """Resolve the JWT payload into a Principal"""
    try:
        building_id: Optional[UUID] = (
            UUID(current_user["building_id"]) if current_user.get("building_id") else None
        )
        return Principal(
            user_id=UUID(current_user["user_id"]),
            role=UserRole(current_user["role"]),
            building_id=building_id,
        )
    except (KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token claims",
        )


def require_roles(*roles: UserRole):
    """Dependency factory restricting a route to the given roles"""

    async def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise ClientError(
                Error(ErrorCode.FORBIDDEN, "Your role cannot perform this action"),
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return principal

    return checker
