"""
Lifecycle transition policies for notifications and incidents.

NOTIFICATION LIFECYCLE (gated):

    new ──────► acknowledged ◄──┐
     │               │          │
     │               ▼          │
     ├─────────► escalated ─────┘
     │               │
     ▼               ▼
    resolved ◄───────┘          (terminal)

INCIDENT STATUS (ungated):

    open → triage → in-progress → resolved → closed is the usual path, but any
    status may be assigned from any other. Incidents get no legality gate.

A transition to the current state is always a legal no-op. Illegal requests
leave the collection untouched; callers decide whether to report them.
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Mapping
from pantau_shared.models import (
    Incident,
    IncidentStatus,
    Notification,
    NotificationLifecycle
)


class GatedTransitionPolicy:
    """Transition legality from an explicit successor table."""

    kind = "gated"

    def __init__(self, entity: str, successors: Mapping[Any, Iterable[Any]]):
        self.entity = entity
        self._successors: Dict[Any, FrozenSet[Any]] = {
            state: frozenset(targets) for state, targets in successors.items()
        }

    def allowed_targets(self, from_state) -> FrozenSet:
        return self._successors.get(from_state, frozenset())

    def can_transition(self, from_state, to_state) -> bool:
        return from_state == to_state or to_state in self.allowed_targets(from_state)

    def is_terminal(self, state) -> bool:
        return not self.allowed_targets(state)


class UngatedTransitionPolicy:
    """Every assignment is allowed; used where the workflow imposes no order."""

    kind = "ungated"

    def __init__(self, entity: str, states: Iterable):
        self.entity = entity
        self._states = frozenset(states)

    def allowed_targets(self, from_state) -> FrozenSet:
        return self._states

    def can_transition(self, from_state, to_state) -> bool:
        return True

    def is_terminal(self, state) -> bool:
        return False


NOTIFICATION_LIFECYCLE_POLICY = GatedTransitionPolicy(
    "notification",
    {
        NotificationLifecycle.NEW: [
            NotificationLifecycle.ACKNOWLEDGED,
            NotificationLifecycle.ESCALATED,
            NotificationLifecycle.RESOLVED,
        ],
        NotificationLifecycle.ACKNOWLEDGED: [
            NotificationLifecycle.ESCALATED,
            NotificationLifecycle.RESOLVED,
        ],
        NotificationLifecycle.ESCALATED: [
            NotificationLifecycle.RESOLVED,
            NotificationLifecycle.ACKNOWLEDGED,
        ],
        NotificationLifecycle.RESOLVED: [],
    },
)

# TODO: decide with operations whether closed incidents may be reopened before gating this
INCIDENT_STATUS_POLICY = UngatedTransitionPolicy("incident", IncidentStatus)


def can_transition_lifecycle(from_state: NotificationLifecycle, to_state: NotificationLifecycle) -> bool:
    """Check a notification lifecycle transition against the gated policy."""
    return NOTIFICATION_LIFECYCLE_POLICY.can_transition(
        NotificationLifecycle(from_state), NotificationLifecycle(to_state)
    )


def transition_notification_lifecycle(
    notifications: Iterable[Notification],
    notification_id: str,
    lifecycle: NotificationLifecycle,
) -> List[Notification]:
    """Return a new list where the matching notification moved to ``lifecycle`` if legal."""
    target = NotificationLifecycle(lifecycle)
    result = []
    for notification in notifications:
        if notification.id != notification_id:
            result.append(notification)
        elif not can_transition_lifecycle(notification.lifecycle, target):
            result.append(notification)
        else:
            result.append(notification.model_copy(update={"lifecycle": target}))
    return result


def transition_incident_status(
    incidents: Iterable[Incident],
    incident_id: str,
    status: IncidentStatus,
) -> List[Incident]:
    """Return a new list where the matching incident carries ``status``."""
    target = IncidentStatus(status)
    result = []
    for incident in incidents:
        if incident.id == incident_id and INCIDENT_STATUS_POLICY.can_transition(incident.status, target):
            result.append(incident.model_copy(update={"status": target}))
        else:
            result.append(incident)
    return result
