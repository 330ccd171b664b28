"""
AuditEvent Entity

Immutable log of host and administrative actions (visit creation,
cancellation, bans).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.clock import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of host/admin actions.

    Business Rules:
    - Immutable (never updated or deleted)
    - user_id nullable for system actions (sweeps)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    building_id: Optional[UUID] = Field(default=None, index=True)
    user_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "visit_created", "visitor_banned"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_building_action", "building_id", "action"),
    )
