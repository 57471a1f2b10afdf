"""Shared layer for Pantau Ops services."""

from .config import Config
from .models import (
    Severity,
    NotificationLifecycle,
    IncidentStatus,
    TargetModule,
    Notification,
    Incident,
    Task,
    IncidentEscalation,
    TransitionOutcome,
    OpsSnapshot
)
from .event_publisher import EventPublisher
from .lifecycle import (
    NOTIFICATION_LIFECYCLE_POLICY,
    INCIDENT_STATUS_POLICY,
    can_transition_lifecycle,
    transition_notification_lifecycle,
    transition_incident_status
)
from .routing import route_for, route_notification, route_incident
from .sla import countdown, format_countdown
from .validators import validate_notification_input

__all__ = [
    "Config",
    "Severity",
    "NotificationLifecycle",
    "IncidentStatus",
    "TargetModule",
    "Notification",
    "Incident",
    "Task",
    "IncidentEscalation",
    "TransitionOutcome",
    "OpsSnapshot",
    "EventPublisher",
    "NOTIFICATION_LIFECYCLE_POLICY",
    "INCIDENT_STATUS_POLICY",
    "can_transition_lifecycle",
    "transition_notification_lifecycle",
    "transition_incident_status",
    "route_for",
    "route_notification",
    "route_incident",
    "countdown",
    "format_countdown",
    "validate_notification_input"
]
