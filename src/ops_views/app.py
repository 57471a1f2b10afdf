"""
Operations Views
Read-side helpers for the notification panel and the incident board. Holds no
state of its own; every change goes through the session store.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from aws_lambda_powertools import Logger

# Import shared modules
from pantau_shared.models import (
    Incident,
    IncidentStatus,
    Notification,
    NotificationLifecycle,
    Severity,
    TargetModule
)
from pantau_shared.routing import route_notification
from pantau_shared.sla import countdown, format_countdown
from pantau_shared.constants import DEFAULT_ACTION_LABEL
from escalation_pipeline.app import OpsStore, is_escalation_severity

logger = Logger()


@dataclass(frozen=True)
class ActionOutcome:
    """What a one-click action did."""

    notification_id: str
    lifecycle_applied: bool
    target: Optional[TargetModule]
    message: str


def is_critical_alert(notification: Notification) -> bool:
    """Escalation-level severity that has not been resolved yet."""
    return (
        is_escalation_severity(notification.severity)
        and notification.lifecycle != NotificationLifecycle.RESOLVED
    )


def filter_notifications(notifications: Iterable[Notification],
                         critical_only: bool) -> List[Notification]:
    if critical_only:
        return [notification for notification in notifications if is_critical_alert(notification)]
    return list(notifications)


def filter_incidents_by_severity(incidents: Iterable[Incident],
                                 severity: Optional[Severity] = None) -> List[Incident]:
    """Incidents of one severity; ``None`` keeps all of them."""
    if severity is None:
        return list(incidents)
    wanted = Severity(severity)
    return [incident for incident in incidents if incident.severity == wanted]


def count_incidents_by_status(incidents: Iterable[Incident]) -> Dict[IncidentStatus, int]:
    """Per-status totals for the board header; every status is present."""
    counts = {status: 0 for status in IncidentStatus}
    for incident in incidents:
        counts[IncidentStatus(incident.status)] += 1
    return counts


def incident_countdown_label(incident: Incident, now: Optional[datetime] = None) -> str:
    return format_countdown(countdown(incident, now))


def view_details_target(notification: Notification) -> Optional[TargetModule]:
    """Module for the "view details" link; ``None`` hides the link."""
    return route_notification(notification)


def find_incident_for_notification(incidents: Iterable[Incident],
                                   notification_id: str) -> Optional[Incident]:
    for incident in incidents:
        if incident.source_notification_id == notification_id:
            return incident
    return None


def run_one_click_action(store: OpsStore, notification_id: str) -> ActionOutcome:
    """Acknowledge a notification and resolve where the operator should go next."""
    notification = store.get_notification(notification_id)
    outcome = store.update_notification_lifecycle(
        notification_id, NotificationLifecycle.ACKNOWLEDGED
    )
    target = route_notification(notification)

    label = notification.action_label or DEFAULT_ACTION_LABEL
    message = f"Aksi dijalankan: {label}"
    if target is not None:
        message = f"{message} → {target.value}"

    logger.info("One-click action executed", extra={
        "notification_id": notification_id,
        "lifecycle_applied": outcome.applied,
        "target": target.value if target else None
    })

    return ActionOutcome(
        notification_id=notification_id,
        lifecycle_applied=outcome.applied,
        target=target,
        message=message
    )
