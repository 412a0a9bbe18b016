from rich.console import Console
from rich.table import Table

from headhunter.application.commands.base import ShowCommand


def render_shortlist(recruits, console: Console) -> None:
    """Display the shortlist in a formatted table."""
    if not recruits:
        console.print("[yellow]Shortlist is empty[/yellow]")
        return

    table = Table(title="Headhunter Shortlist")
    table.add_column("#", justify="right", width=4)
    table.add_column("Tag", style="cyan", width=12)
    table.add_column("Name", width=18)
    table.add_column("Trophies", justify="right", width=9)
    table.add_column("Donations", justify="right", width=10)
    table.add_column("War", justify="right", width=6)
    table.add_column("Raw", justify="right", width=7)
    table.add_column("Perf %", style="green", justify="right", width=7)
    table.add_column("Found", width=11)
    table.add_column("Invited", width=8)

    for i, r in enumerate(recruits, start=1):
        table.add_row(
            str(i),
            r.tag,
            r.name,
            str(r.trophies),
            str(r.donations),
            str(r.war_score),
            str(r.raw_score),
            str(r.perf_score),
            r.found_date.strftime("%Y-%m-%d"),
            "yes" if r.invited else "",
        )

    console.print(table)


async def handle_show(
    headhunter, command: ShowCommand, console: Console | None = None
) -> int:
    """Display the stored shortlist

    Returns:
        Exit code (always 0)
    """
    recruits = list(headhunter.load_tracked().values())
    if command.limit is not None:
        recruits = recruits[: command.limit]
    render_shortlist(recruits, console or Console())
    return 0
