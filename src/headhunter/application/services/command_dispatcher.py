from loguru import logger

from headhunter.application.commands.base import (
    DismissCommand,
    PayloadCommand,
    RunCommand,
    ScoutCommand,
    ShowCommand,
)
from headhunter.application.commands.dismiss import handle_dismiss
from headhunter.application.commands.payload import handle_payload
from headhunter.application.commands.run import handle_run
from headhunter.application.commands.scout import handle_scout
from headhunter.application.commands.show import handle_show


class CommandDispatcher:
    """Dispatches CLI commands to appropriate handlers"""

    def __init__(self, headhunter) -> None:
        self.headhunter = headhunter
        self._handlers = {
            "scout": self._handle_scout,
            "run": self._handle_run,
            "dismiss": self._handle_dismiss,
            "payload": self._handle_payload,
            "show": self._handle_show,
        }

    async def dispatch(self, argv: list[str]) -> int:
        """Parse and execute command

        Args:
            argv: Command line arguments (sys.argv)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        if len(argv) < 2:
            self._print_usage()
            return 1

        method = argv[1]
        handler = self._handlers.get(method)

        if handler is None:
            logger.error(f"Unknown method: {method}")
            self._print_usage()
            return 1

        return await handler(argv)

    def _print_usage(self) -> None:
        """Print available commands"""
        logger.error(
            "No method specified. Available: scout [--manual], run, "
            "dismiss TAG..., payload [--refresh], show [LIMIT]"
        )

    async def _handle_scout(self, argv: list[str]) -> int:
        """Handle scout command"""
        command = ScoutCommand(name="scout", manual="--manual" in argv[2:])
        return await handle_scout(self.headhunter, command)

    async def _handle_run(self, argv: list[str]) -> int:
        """Handle run command"""
        return await handle_run(self.headhunter, RunCommand(name="run"))

    async def _handle_dismiss(self, argv: list[str]) -> int:
        """Handle dismiss command"""
        command = DismissCommand(name="dismiss", tags=argv[2:])
        return await handle_dismiss(self.headhunter, command)

    async def _handle_payload(self, argv: list[str]) -> int:
        """Handle payload command"""
        command = PayloadCommand(name="payload", refresh="--refresh" in argv[2:])
        return await handle_payload(self.headhunter, command)

    async def _handle_show(self, argv: list[str]) -> int:
        """Handle show command"""
        limit = None
        if len(argv) > 2:
            try:
                limit = int(argv[2])
            except ValueError:
                logger.error(f"Invalid limit: {argv[2]}")
                return 1
        command = ShowCommand(name="show", limit=limit)
        return await handle_show(self.headhunter, command)
