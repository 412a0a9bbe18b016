from loguru import logger

from headhunter.application.commands.base import RunCommand
from headhunter.recruiting.headhunter import run_tasks


async def handle_run(headhunter, command: RunCommand) -> int:
    """Scheduled run: each task is attempted even if an earlier one fails

    Returns:
        Exit code (0 when every task succeeded, 1 otherwise)
    """
    outcomes = await run_tasks(
        [
            ("headhunter", lambda: headhunter.scout("TASK_HH")),
            ("payload", headhunter.payload.refresh),
        ]
    )
    failed = [name for name, ok in outcomes.items() if not ok]
    if failed:
        logger.warning(f"Scheduled run finished with failures: {', '.join(failed)}")
        return 1
    logger.info("Scheduled run finished")
    return 0
