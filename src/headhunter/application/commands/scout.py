from loguru import logger

from headhunter.application.commands.base import ScoutCommand
from headhunter.shared.exceptions import (
    CredentialsExhaustedError,
    LockTimeoutError,
)


async def handle_scout(headhunter, command: ScoutCommand) -> int:
    """Scan tournaments and rewrite the shortlist

    Args:
        headhunter: Headhunter instance
        command: ScoutCommand; manual runs take the MANUAL_HH lock

    Returns:
        Exit code (0 for success, 1 for error)
    """
    operation = "MANUAL_HH" if command.manual else "TASK_HH"
    logger.info(f"Starting scout ({operation})")
    try:
        report = await headhunter.scout(operation)
    except LockTimeoutError as e:
        logger.error(f"Scout skipped: {e}")
        return 1
    except CredentialsExhaustedError as e:
        logger.error(f"Scout aborted, no usable API keys: {e}")
        return 1
    except Exception as e:
        logger.error(f"Scout failed: {e}")
        return 1

    status = "complete"
    if report.partial:
        status = f"partial, stopped after {report.stopped_after}"
    logger.info(
        f"Scout {status}. Pool {report.pool_size} "
        f"({report.new_recruits} new), {report.requests} API requests"
    )
    return 0
