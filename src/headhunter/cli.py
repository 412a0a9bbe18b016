import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from headhunter.application.services.command_dispatcher import CommandDispatcher
from headhunter.core.config import Config
from headhunter.recruiting.headhunter import Headhunter
from headhunter.shared.exceptions import ConfigurationError


def main() -> int:
    """CLI entry point for the headhunter

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    logger.add(
        "logs/headhunter_{time}.log",
        rotation="1 day",
        retention="30 days",
        compression="gz",
        level="INFO",
    )
    logger.info("=" * 60)
    logger.info("HEADHUNTER - RECRUIT SCOUT")
    logger.info("=" * 60)

    load_dotenv()
    try:
        config = Config.from_env()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    headhunter = Headhunter(config)
    dispatcher = CommandDispatcher(headhunter)

    try:
        return asyncio.run(dispatcher.dispatch(sys.argv))
    except KeyboardInterrupt:
        logger.warning("Headhunter stopped manually.")
        return 1
    except Exception as e:
        logger.critical(f"Unhandled exception in headhunter execution: {e}")
        return 1
    finally:
        headhunter.close()
        logger.info("Headhunter shutdown complete.")


if __name__ == "__main__":
    sys.exit(main())
