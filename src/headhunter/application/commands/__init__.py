from headhunter.application.commands.base import (
    Command,
    DismissCommand,
    PayloadCommand,
    RunCommand,
    ScoutCommand,
    ShowCommand,
)

__all__ = [
    "Command",
    "ScoutCommand",
    "RunCommand",
    "DismissCommand",
    "PayloadCommand",
    "ShowCommand",
]
