from loguru import logger

from headhunter.application.commands.base import DismissCommand


async def handle_dismiss(headhunter, command: DismissCommand) -> int:
    """Mark recruits as invited and blacklist them

    Args:
        headhunter: Headhunter instance
        command: DismissCommand with player tags

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not command.tags:
        logger.error("No tags given. Usage: dismiss TAG [TAG ...]")
        return 1

    try:
        count = await headhunter.mark_invited(command.tags)
    except Exception as e:
        logger.error(f"Dismiss failed: {e}")
        return 1

    logger.info(f"Dismissed {count} of {len(command.tags)} recruits")
    return 0
