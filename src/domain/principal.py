from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from src.domain.entities import UserRole, Visit


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as resolved by the identity provider"""

    user_id: UUID
    role: UserRole
    building_id: Optional[UUID] = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.super_admin

    def is_admin_of(self, building_id: UUID) -> bool:
        if self.is_super_admin:
            return True
        return self.role == UserRole.building_admin and self.building_id == building_id

    def belongs_to(self, building_id: UUID) -> bool:
        return self.is_super_admin or self.building_id == building_id

    def can_manage_visit(self, visit: Visit) -> bool:
        """Host of the visit or an admin of its building"""
        return visit.host_id == self.user_id or self.is_admin_of(visit.building_id)

    def can_scan_in(self, building_id: UUID) -> bool:
        if self.is_super_admin:
            return True
        return (
            self.role in (UserRole.security, UserRole.building_admin)
            and self.building_id == building_id
        )
