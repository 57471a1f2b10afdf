"""Read-side views over an operations session."""

from .app import (
    ActionOutcome,
    count_incidents_by_status,
    filter_incidents_by_severity,
    filter_notifications,
    find_incident_for_notification,
    incident_countdown_label,
    is_critical_alert,
    run_one_click_action,
    view_details_target
)

__all__ = [
    "ActionOutcome",
    "count_incidents_by_status",
    "filter_incidents_by_severity",
    "filter_notifications",
    "find_incident_for_notification",
    "incident_countdown_label",
    "is_critical_alert",
    "run_one_click_action",
    "view_details_target"
]
