"""Application commands package."""

from .extensions import (
    CreateIpoExtensionCommand,
    CreateIpoExtensionCommandHandler,
    DeleteIpoExtensionCommand,
    DeleteIpoExtensionCommandHandler,
    UpdateIpoExtensionCommand,
    UpdateIpoExtensionCommandHandler,
)
from .ipo_command_handler_base import IpoCommandHandlerBase
from .sync_ipo_user_stats_command import SyncIpoUserStatsCommand, SyncIpoUserStatsCommandHandler
from .users import (
    DeleteIpoUserCommand,
    DeleteIpoUserCommandHandler,
    UpdateIpoUserCommand,
    UpdateIpoUserCommandHandler,
)

__all__ = [
    "CreateIpoExtensionCommand",
    "CreateIpoExtensionCommandHandler",
    "DeleteIpoExtensionCommand",
    "DeleteIpoExtensionCommandHandler",
    "DeleteIpoUserCommand",
    "DeleteIpoUserCommandHandler",
    "IpoCommandHandlerBase",
    "SyncIpoUserStatsCommand",
    "SyncIpoUserStatsCommandHandler",
    "UpdateIpoExtensionCommand",
    "UpdateIpoExtensionCommandHandler",
    "UpdateIpoUserCommand",
    "UpdateIpoUserCommandHandler",
]
