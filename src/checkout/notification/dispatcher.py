"""NotificationDispatcher: best-effort push to a buyer's live session.

No queue, no retry. A buyer without a registered connection simply misses
the push, and a failing connection is logged and forgotten about.
"""

import structlog

from checkout.notification.registry import ConnectionRegistry

logger = structlog.get_logger(__name__)

ORDER_COMPLETE = "OrderCompleteNotification"


class NotificationDispatcher:
    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    def notify(self, buyer: str, payload: dict, message_type: str = ORDER_COMPLETE) -> bool:
        """Push ``payload`` to ``buyer``. Returns True if a send was attempted successfully."""
        connection = self.registry.connection_for(buyer)
        if connection is None:
            logger.debug("notification.no_session", buyer=buyer, message_type=message_type)
            return False

        try:
            connection.send({"type": message_type, "payload": payload})
        except Exception as exc:
            logger.warning("notification.dropped", buyer=buyer, message_type=message_type, error=str(exc))
            return False

        logger.info("notification.sent", buyer=buyer, message_type=message_type)
        return True
