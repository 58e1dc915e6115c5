"""Extension-related commands package."""

from .create_ipo_extension_command import CreateIpoExtensionCommand, CreateIpoExtensionCommandHandler
from .delete_ipo_extension_command import DeleteIpoExtensionCommand, DeleteIpoExtensionCommandHandler
from .update_ipo_extension_command import UpdateIpoExtensionCommand, UpdateIpoExtensionCommandHandler

__all__ = [
    "CreateIpoExtensionCommand",
    "CreateIpoExtensionCommandHandler",
    "DeleteIpoExtensionCommand",
    "DeleteIpoExtensionCommandHandler",
    "UpdateIpoExtensionCommand",
    "UpdateIpoExtensionCommandHandler",
]
