"""User-related commands package."""

from .delete_ipo_user_command import DeleteIpoUserCommand, DeleteIpoUserCommandHandler
from .update_ipo_user_command import UpdateIpoUserCommand, UpdateIpoUserCommandHandler

__all__ = [
    "DeleteIpoUserCommand",
    "DeleteIpoUserCommandHandler",
    "UpdateIpoUserCommand",
    "UpdateIpoUserCommandHandler",
]
