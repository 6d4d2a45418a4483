import logging

from kombat.events.bus import EventBus, EVENT_COMMAND_REJECTED

logger = logging.getLogger(__name__)


def reject_command(event_bus: EventBus, command: str, reason: str, **details) -> bool:
    """Report a refused command; always returns False so callers can ``return reject_command(...)``."""
    logger.debug("Rejected %s: %s %s", command, reason, details or "")
    event_bus.emit(EVENT_COMMAND_REJECTED, command=command, reason=reason, **details)
    return False
