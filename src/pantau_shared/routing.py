"""Keyword routing from free text to the operational module it concerns."""

from typing import Optional, Sequence, Tuple
from pantau_shared.models import Incident, Notification, TargetModule

# Ordered; the first rule with a matching keyword wins
ROUTING_RULES: Sequence[Tuple[Tuple[str, ...], TargetModule]] = (
    (("darah", "icu", "kritis"), TargetModule.MEDICAL_SERVICES),
    (("stok",), TargetModule.LOGISTICS_AND_STOCK),
    (("pengiriman",), TargetModule.DISTRIBUTION),
    (("jadwal",), TargetModule.SCHEDULE_AND_TASKS),
)


def route_for(text: Optional[str]) -> Optional[TargetModule]:
    """Infer the target module from ``text``; ``None`` when nothing matches."""
    if not text:
        return None
    normalized = text.lower()
    for keywords, module in ROUTING_RULES:
        if any(keyword in normalized for keyword in keywords):
            return module
    return None


def route_notification(notification: Notification) -> Optional[TargetModule]:
    """Route a notification, preferring its explicit category tag over its title."""
    if notification.category is not None:
        return TargetModule(notification.category)
    return route_for(notification.title)


def route_incident(incident: Incident) -> Optional[TargetModule]:
    return route_for(incident.title)
