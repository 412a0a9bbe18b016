"""Services module for application layer"""

from headhunter.application.services.command_dispatcher import CommandDispatcher

__all__ = ["CommandDispatcher"]
