"""
Ban use cases - per-resident and building-wide visitor bans
"""

from .ban_visitor_use_case import BanVisitorUseCase
from .check_ban_use_case import CheckBanUseCase
from .dtos import BanVisitorCommand
from .expire_temporary_bans_use_case import ExpireTemporaryBansUseCase
from .list_bans_use_case import ListBansUseCase
from .unban_visitor_use_case import UnbanVisitorUseCase

__all__ = [
    "BanVisitorUseCase",
    "CheckBanUseCase",
    "ExpireTemporaryBansUseCase",
    "ListBansUseCase",
    "UnbanVisitorUseCase",
    "BanVisitorCommand",
]
