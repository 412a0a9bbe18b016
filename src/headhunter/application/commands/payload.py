import json

from loguru import logger

from headhunter.application.commands.base import PayloadCommand


async def handle_payload(headhunter, command: PayloadCommand, out=print) -> int:
    """Print the web payload JSON

    Returns:
        Exit code (0 for success, 1 when the payload is an error envelope)
    """
    payload = await headhunter.payload.get(force_refresh=command.refresh)
    out(payload)

    if not json.loads(payload).get("success"):
        logger.error("Payload generation reported an error")
        return 1
    return 0
