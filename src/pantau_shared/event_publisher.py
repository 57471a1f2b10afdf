"""In-process event publisher for Pantau Ops sessions."""

import uuid
from collections import defaultdict
from typing import Dict, Any, List, Callable
from datetime import datetime, timezone
from aws_lambda_powertools import Logger

logger = Logger()

EventHandler = Callable[[Dict[str, Any]], None]

# Subscribing to this detail type receives every event
ALL_EVENTS = "*"


class EventPublisher:
    """Publisher dispatching session events to subscribed handlers.

    Events carry the same envelope as the platform's bus events
    (``id``, ``source``, ``detail-type``, ``time``, ``detail``) so subscribers
    can be moved to a real bus without reshaping payloads.
    """

    def __init__(self, name: str = "pantau-session"):
        """Initialize an empty subscriber registry."""
        self.name = name
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self.published_count = 0

        logger.info(f"Initialized event publisher: {name}")

    def subscribe(self, detail_type: str, handler: EventHandler) -> None:
        """Register ``handler`` for ``detail_type`` (or ``ALL_EVENTS``)."""
        self._handlers[detail_type].append(handler)

    def unsubscribe(self, detail_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(detail_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def clear(self) -> None:
        """Drop every subscriber."""
        self._handlers.clear()

    def _envelope(self, source: str, detail_type: str, detail: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": str(uuid.uuid4()),
            "source": source,
            "detail-type": detail_type,
            "time": datetime.now(timezone.utc).isoformat(),
            "detail": detail
        }

    def _dispatch(self, event: Dict[str, Any]) -> None:
        handlers = list(self._handlers.get(event["detail-type"], []))
        handlers.extend(self._handlers.get(ALL_EVENTS, []))
        for handler in handlers:
            handler(event)
        self.published_count += 1

    def publish_batch_events(self, events: List[Dict[str, Any]]) -> List[str]:
        """Publish multiple events; a failing subscriber does not stop the batch."""
        if not events:
            return []

        event_ids = []
        failed = 0
        for item in events:
            event = self._envelope(item["source"], item["detail_type"], item["detail"])
            try:
                self._dispatch(event)
            except Exception as e:
                failed += 1
                logger.error(f"Failed to dispatch event: {str(e)}", extra={
                    "source": item["source"],
                    "detail_type": item["detail_type"]
                }, exc_info=True)
                continue
            event_ids.append(event["id"])

        if failed:
            logger.error(f"Failed to publish {failed} events")
        logger.info(f"Published batch of {len(event_ids)} events")

        return event_ids
