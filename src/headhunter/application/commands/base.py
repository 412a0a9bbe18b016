from dataclasses import dataclass, field


@dataclass
class Command:
    """Base command class"""

    name: str


@dataclass
class ScoutCommand(Command):
    """Scan tournaments and rewrite the shortlist"""

    manual: bool = False


@dataclass
class RunCommand(Command):
    """Scheduled run: scout, then refresh the web payload"""


@dataclass
class DismissCommand(Command):
    """Mark recruits as invited and blacklist them"""

    tags: list[str] = field(default_factory=list)


@dataclass
class PayloadCommand(Command):
    """Print the web payload"""

    refresh: bool = False


@dataclass
class ShowCommand(Command):
    """Display the shortlist"""

    limit: int | None = None
