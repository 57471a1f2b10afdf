"""
Escalation Pipeline
Promotes high-severity notifications into tracked incidents, exactly once each,
and owns the session state every operations surface reads from.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, List, Optional, Iterable, Callable, Union, AbstractSet
from aws_lambda_powertools import Logger
from aws_lambda_powertools.metrics import EphemeralMetrics, MetricUnit

# Import shared modules
from pantau_shared.config import Config
from pantau_shared.models import (
    Severity,
    IncidentStatus,
    Notification,
    Incident,
    Task,
    IncidentEscalation,
    TransitionOutcome,
    OpsSnapshot
)
from pantau_shared.event_publisher import EventPublisher
from pantau_shared.lifecycle import (
    NOTIFICATION_LIFECYCLE_POLICY,
    INCIDENT_STATUS_POLICY,
    transition_notification_lifecycle,
    transition_incident_status
)
from pantau_shared.validators import (
    validate_notification_input,
    validate_lifecycle,
    validate_incident_status
)
from pantau_shared.constants import (
    EVENT_SOURCE_NOTIFICATIONS,
    EVENT_SOURCE_INCIDENTS,
    EVENT_SOURCE_TASKS,
    EVENT_TYPE_NOTIFICATION_RECEIVED,
    EVENT_TYPE_NOTIFICATION_LIFECYCLE_CHANGED,
    EVENT_TYPE_INCIDENT_DECLARED,
    EVENT_TYPE_STATUS_CHANGED,
    EVENT_TYPE_TASK_CREATED,
    EVENT_TYPE_TRANSITION_REJECTED,
    ID_PREFIX_NOTIFICATION,
    ID_PREFIX_INCIDENT,
    ID_PREFIX_TASK,
    TASK_COLUMN_NEW,
    TASK_COLUMNS,
    DEFAULT_CRITICAL_SLA_MINUTES,
    DEFAULT_HIGH_SLA_MINUTES,
    TEAM_PRIORITY_RESPONSE,
    TEAM_MEDICAL_OPERATIONS,
    TEAM_COORDINATION,
    METRICS_NAMESPACE
)
from pantau_shared.exceptions import (
    NotificationNotFoundError,
    IncidentNotFoundError,
    SessionClosedError
)
from pantau_shared.utils import (
    UuidIdGenerator,
    advance_age_label,
    build_id_generator,
    prefixed_id,
    utc_now
)
from escalation_pipeline.seed_data import initial_notification_payloads, initial_task_columns

logger = Logger()

# Lowest severity that becomes an incident
ESCALATION_THRESHOLD = Severity.TINGGI

NotificationPayload = Union[Notification, Dict[str, Any]]


# ============================================================
# ELIGIBILITY & DEDUPE
# ============================================================

def is_escalation_severity(severity) -> bool:
    """Tinggi and Kritis notifications become incidents."""
    try:
        return Severity(severity).rank >= ESCALATION_THRESHOLD.rank
    except ValueError:
        return False


def select_escalation_candidates(
    notifications: Iterable[Notification],
    processed_ids: AbstractSet[str],
) -> List[Notification]:
    """Return, in input order, the notifications that still need an incident.

    Depends only on its two arguments, so running it again after the processed
    set has been extended yields nothing new.
    """
    candidates = []
    seen = set()
    for notification in notifications:
        if not is_escalation_severity(notification.severity):
            continue
        if notification.id in processed_ids or notification.id in seen:
            continue
        seen.add(notification.id)
        candidates.append(notification)
    return candidates


# ============================================================
# INCIDENT FACTORY
# ============================================================

def sla_minutes_for(severity,
                    critical_sla_minutes: int = DEFAULT_CRITICAL_SLA_MINUTES,
                    high_sla_minutes: int = DEFAULT_HIGH_SLA_MINUTES) -> int:
    """SLA budget in minutes for an escalated severity."""
    return critical_sla_minutes if severity == Severity.KRITIS else high_sla_minutes


def infer_default_team(severity) -> str:
    """Default responder group for a severity."""
    if severity == Severity.KRITIS:
        return TEAM_PRIORITY_RESPONSE
    if severity == Severity.TINGGI:
        return TEAM_MEDICAL_OPERATIONS
    return TEAM_COORDINATION


class IncidentFactory:
    """Builds the incident and follow-up task for one eligible notification."""

    def __init__(self, id_generator=None, clock: Optional[Callable[[], datetime]] = None,
                 critical_sla_minutes: int = DEFAULT_CRITICAL_SLA_MINUTES,
                 high_sla_minutes: int = DEFAULT_HIGH_SLA_MINUTES):
        """Initialize the factory with its id source, clock and SLA budgets."""
        self.id_generator = id_generator or UuidIdGenerator()
        self.clock = clock or utc_now
        self.critical_sla_minutes = critical_sla_minutes
        self.high_sla_minutes = high_sla_minutes

    def build(self, notification: Notification,
              created_at: Optional[datetime] = None) -> IncidentEscalation:
        """Derive an incident plus its linked task from ``notification``."""
        created_at = created_at or self.clock()
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        severity = Severity(notification.severity)
        sla_minutes = sla_minutes_for(
            severity, self.critical_sla_minutes, self.high_sla_minutes
        )
        team = infer_default_team(severity)

        # Incident and task share one seed so the pair is traceable by id alone
        seed = self.id_generator.new_seed()
        incident_id = prefixed_id(ID_PREFIX_INCIDENT, seed)

        incident = Incident(
            id=incident_id,
            title=notification.title,
            source_notification_id=notification.id,
            severity=severity,
            status=IncidentStatus.OPEN,
            team=team,
            created_at=created_at,
            sla_minutes=sla_minutes
        )

        description = notification.description
        if notification.location:
            description = f"{description} ({notification.location})" if description else notification.location

        # Task board due dates are calendar dates; the exact deadline lives on the incident
        task = Task(
            id=prefixed_id(ID_PREFIX_TASK, seed),
            title=f"Tindak lanjut {incident_id}: {notification.title}",
            description=description,
            assignee=team,
            due_date=(created_at + timedelta(minutes=sla_minutes)).date(),
            linked_incident_id=incident_id
        )

        return IncidentEscalation(incident=incident, task=task)


# ============================================================
# SESSION STORE
# ============================================================

class OpsStore:
    """Session-scoped owner of notifications, incidents, tasks and the processed set.

    All state lives in one immutable ``OpsSnapshot``; every operation builds the
    next snapshot and installs it with a single assignment, so readers never see
    an incident without its processed-set entry or the reverse. Events are
    published only after the new snapshot is installed.
    """

    def __init__(self, factory: Optional[IncidentFactory] = None,
                 publisher: Optional[EventPublisher] = None,
                 metrics: Optional[EphemeralMetrics] = None,
                 id_generator=None,
                 notification_feed_limit: int = 0,
                 snapshot: Optional[OpsSnapshot] = None):
        """Initialize an empty (or pre-seeded) session store."""
        self.id_generator = id_generator or (factory.id_generator if factory else UuidIdGenerator())
        self.factory = factory or IncidentFactory(id_generator=self.id_generator)
        self.publisher = publisher or EventPublisher()
        self.metrics = metrics or EphemeralMetrics(namespace=METRICS_NAMESPACE)
        self.notification_feed_limit = notification_feed_limit
        self._snapshot = snapshot.model_copy(deep=True) if snapshot is not None else OpsSnapshot()
        self._closed = False

    # ------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------

    def __enter__(self) -> "OpsStore":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Tear the session down: flush this session's metrics and drop subscribers.

        Metrics are per-session buffers, so closing one store never flushes
        another store's counts.
        """
        if self._closed:
            return
        self._closed = True
        self.metrics.flush_metrics()
        self.publisher.clear()
        logger.info("Session closed", extra={
            "notifications": len(self._snapshot.notifications),
            "incidents": len(self._snapshot.incidents),
            "processed_notifications": len(self._snapshot.processed_notification_ids)
        })

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Session store is closed")

    def _commit(self, snapshot: OpsSnapshot) -> None:
        self._snapshot = snapshot

    # ------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------

    def snapshot(self) -> OpsSnapshot:
        """Detached copy of the current state; changing it does not touch the store."""
        return self._snapshot.model_copy(deep=True)

    def list_notifications(self) -> List[Notification]:
        return list(self._snapshot.notifications)

    def get_notification(self, notification_id: str) -> Notification:
        for notification in self._snapshot.notifications:
            if notification.id == notification_id:
                return notification
        raise NotificationNotFoundError(f"Notification {notification_id} not found")

    def list_incidents(self) -> List[Incident]:
        return list(self._snapshot.incidents)

    def get_incident(self, incident_id: str) -> Incident:
        for incident in self._snapshot.incidents:
            if incident.id == incident_id:
                return incident
        raise IncidentNotFoundError(f"Incident {incident_id} not found")

    def list_tasks_by_column(self) -> Dict[str, List[Task]]:
        """Task board columns in board order; the lists are copies."""
        columns = self._snapshot.task_columns
        board = {column: list(columns.get(column, ())) for column in TASK_COLUMNS}
        for column, tasks in columns.items():
            board.setdefault(column, list(tasks))
        return board

    @property
    def processed_notification_ids(self) -> frozenset:
        return self._snapshot.processed_notification_ids

    # ------------------------------------------------------------
    # Notification feed
    # ------------------------------------------------------------

    def _to_notification(self, payload: NotificationPayload) -> Notification:
        if isinstance(payload, Notification):
            return payload
        validated = validate_notification_input(payload)
        notification_id = validated.id or prefixed_id(
            ID_PREFIX_NOTIFICATION, self.id_generator.new_seed()
        )
        return Notification(id=notification_id, **validated.model_dump(exclude={"id"}))

    def ingest_notification(self, payload: NotificationPayload) -> List[IncidentEscalation]:
        """Add one notification to the feed and run an escalation cycle."""
        return self.ingest_notifications([payload])

    def ingest_notifications(self, payloads: Iterable[NotificationPayload]) -> List[IncidentEscalation]:
        """Add notifications (oldest first) to the feed and run an escalation cycle.

        Every payload is validated before anything is committed. Notifications
        whose id is already in the feed are skipped. Returns the escalations
        produced by the cycle.
        """
        self._ensure_open()
        incoming = [self._to_notification(payload) for payload in payloads]

        snapshot = self._snapshot
        known_ids = {notification.id for notification in snapshot.notifications}
        accepted = []
        for notification in incoming:
            if notification.id in known_ids:
                logger.warning("Duplicate notification ignored", extra={
                    "notification_id": notification.id
                })
                continue
            known_ids.add(notification.id)
            accepted.append(notification)

        if accepted:
            notifications = tuple(reversed(accepted)) + snapshot.notifications
            if self.notification_feed_limit > 0:
                notifications = notifications[:self.notification_feed_limit]
            self._commit(snapshot.model_copy(update={"notifications": notifications}))
            self.metrics.add_metric(name="NotificationIngested", unit=MetricUnit.Count, value=len(accepted))
            logger.info(f"Ingested {len(accepted)} notifications", extra={
                "notification_ids": [notification.id for notification in accepted]
            })

        # Candidates are computed from the full list, including trimmed-off entries
        escalations = self._escalate(list(reversed(accepted)) + list(snapshot.notifications))

        events = [
            {
                "source": EVENT_SOURCE_NOTIFICATIONS,
                "detail_type": EVENT_TYPE_NOTIFICATION_RECEIVED,
                "detail": {
                    "notificationId": notification.id,
                    "severity": notification.severity.value,
                    "title": notification.title,
                    "location": notification.location
                }
            }
            for notification in accepted
        ]
        events.extend(self._escalation_events(escalations))
        self.publisher.publish_batch_events(events)

        return escalations

    def tick_notification_ages(self) -> None:
        """Advance every notification's age label by one minute."""
        self._ensure_open()
        snapshot = self._snapshot
        aged = tuple(
            notification.model_copy(update={"time": advance_age_label(notification.time)})
            for notification in snapshot.notifications
        )
        self._commit(snapshot.model_copy(update={"notifications": aged}))

    # ------------------------------------------------------------
    # Escalation
    # ------------------------------------------------------------

    def run_escalation_cycle(self) -> List[IncidentEscalation]:
        """Escalate every eligible, not yet processed notification in the feed."""
        self._ensure_open()
        escalations = self._escalate(self._snapshot.notifications)
        self.publisher.publish_batch_events(self._escalation_events(escalations))
        return escalations

    def _escalate(self, notifications: Iterable[Notification]) -> List[IncidentEscalation]:
        snapshot = self._snapshot
        candidates = select_escalation_candidates(
            notifications, snapshot.processed_notification_ids
        )
        if not candidates:
            return []

        # One clock reading per batch
        created_at = self.factory.clock()
        escalations = [self.factory.build(candidate, created_at=created_at) for candidate in candidates]

        task_columns = dict(snapshot.task_columns)
        task_columns[TASK_COLUMN_NEW] = (
            tuple(escalation.task for escalation in escalations)
            + tuple(task_columns.get(TASK_COLUMN_NEW, ()))
        )

        self._commit(snapshot.model_copy(update={
            "incidents": tuple(escalation.incident for escalation in escalations) + snapshot.incidents,
            "task_columns": task_columns,
            "processed_notification_ids": snapshot.processed_notification_ids
            | frozenset(candidate.id for candidate in candidates)
        }))

        self.metrics.add_metric(name="IncidentEscalated", unit=MetricUnit.Count, value=len(escalations))
        for escalation in escalations:
            logger.info(f"Incident {escalation.incident.id} declared", extra={
                "incident_id": escalation.incident.id,
                "task_id": escalation.task.id,
                "source_notification_id": escalation.incident.source_notification_id,
                "severity": escalation.incident.severity.value,
                "team": escalation.incident.team,
                "sla_minutes": escalation.incident.sla_minutes
            })

        return escalations

    def _escalation_events(self, escalations: List[IncidentEscalation]) -> List[Dict[str, Any]]:
        events = []
        for escalation in escalations:
            incident = escalation.incident
            events.append({
                "source": EVENT_SOURCE_INCIDENTS,
                "detail_type": EVENT_TYPE_INCIDENT_DECLARED,
                "detail": {
                    "incidentId": incident.id,
                    "title": incident.title,
                    "severity": incident.severity.value,
                    "status": incident.status.value,
                    "team": incident.team,
                    "sourceNotificationId": incident.source_notification_id,
                    "createdAt": incident.created_at.isoformat(),
                    "slaMinutes": incident.sla_minutes
                }
            })
            events.append({
                "source": EVENT_SOURCE_TASKS,
                "detail_type": EVENT_TYPE_TASK_CREATED,
                "detail": {
                    "taskId": escalation.task.id,
                    "incidentId": incident.id,
                    "assignee": escalation.task.assignee,
                    "dueDate": escalation.task.due_date.isoformat(),
                    "column": TASK_COLUMN_NEW
                }
            })
        return events

    # ------------------------------------------------------------
    # Lifecycle updates
    # ------------------------------------------------------------

    def _reject(self, source: str, entity_id: str, from_status: Optional[str],
                to_status: str, reason: str) -> TransitionOutcome:
        logger.warning("Transition rejected", extra={
            "entity_id": entity_id,
            "from_status": from_status,
            "to_status": to_status,
            "reason": reason
        })
        self.metrics.add_metric(name="TransitionRejected", unit=MetricUnit.Count, value=1)
        self.publisher.publish_batch_events([{
            "source": source,
            "detail_type": EVENT_TYPE_TRANSITION_REJECTED,
            "detail": {
                "entityId": entity_id,
                "fromStatus": from_status,
                "toStatus": to_status,
                "reason": reason
            }
        }])
        return TransitionOutcome(
            entity_id=entity_id,
            from_status=from_status,
            to_status=to_status,
            applied=False,
            reason=reason
        )

    def update_notification_lifecycle(self, notification_id: str, lifecycle) -> TransitionOutcome:
        """Move a notification along its lifecycle; illegal moves change nothing."""
        self._ensure_open()
        target = validate_lifecycle(lifecycle)
        snapshot = self._snapshot

        current = next(
            (item for item in snapshot.notifications if item.id == notification_id), None
        )
        if current is None:
            return self._reject(EVENT_SOURCE_NOTIFICATIONS, notification_id, None,
                                target.value, "not_found")

        from_state = current.lifecycle.value
        if current.lifecycle == target:
            return TransitionOutcome(entity_id=notification_id, from_status=from_state,
                                     to_status=target.value, applied=False, reason="unchanged")

        if not NOTIFICATION_LIFECYCLE_POLICY.can_transition(current.lifecycle, target):
            return self._reject(EVENT_SOURCE_NOTIFICATIONS, notification_id, from_state,
                                target.value, "illegal_transition")

        notifications = transition_notification_lifecycle(
            snapshot.notifications, notification_id, target
        )
        self._commit(snapshot.model_copy(update={"notifications": tuple(notifications)}))

        logger.info("Notification lifecycle updated", extra={
            "notification_id": notification_id,
            "from_status": from_state,
            "to_status": target.value
        })
        self.publisher.publish_batch_events([{
            "source": EVENT_SOURCE_NOTIFICATIONS,
            "detail_type": EVENT_TYPE_NOTIFICATION_LIFECYCLE_CHANGED,
            "detail": {
                "notificationId": notification_id,
                "fromLifecycle": from_state,
                "toLifecycle": target.value
            }
        }])

        return TransitionOutcome(entity_id=notification_id, from_status=from_state,
                                 to_status=target.value, applied=True, reason="applied")

    def update_incident_status(self, incident_id: str, status) -> TransitionOutcome:
        """Assign an incident status. Incident statuses carry no ordering gate."""
        self._ensure_open()
        target = validate_incident_status(status)
        snapshot = self._snapshot

        current = next((item for item in snapshot.incidents if item.id == incident_id), None)
        if current is None:
            return self._reject(EVENT_SOURCE_INCIDENTS, incident_id, None,
                                target.value, "not_found")

        from_status = current.status.value
        if current.status == target:
            return TransitionOutcome(entity_id=incident_id, from_status=from_status,
                                     to_status=target.value, applied=False, reason="unchanged")

        if not INCIDENT_STATUS_POLICY.can_transition(current.status, target):
            return self._reject(EVENT_SOURCE_INCIDENTS, incident_id, from_status,
                                target.value, "illegal_transition")

        incidents = transition_incident_status(snapshot.incidents, incident_id, target)
        self._commit(snapshot.model_copy(update={"incidents": tuple(incidents)}))

        logger.info("Incident status updated", extra={
            "incident_id": incident_id,
            "from_status": from_status,
            "to_status": target.value
        })
        self.publisher.publish_batch_events([{
            "source": EVENT_SOURCE_INCIDENTS,
            "detail_type": EVENT_TYPE_STATUS_CHANGED,
            "detail": {
                "incidentId": incident_id,
                "fromStatus": from_status,
                "toStatus": target.value
            }
        }])

        return TransitionOutcome(entity_id=incident_id, from_status=from_status,
                                 to_status=target.value, applied=True, reason="applied")


# ============================================================
# SESSION CONSTRUCTION
# ============================================================

def create_session(config: Optional[Config] = None, *,
                   id_generator=None,
                   clock: Optional[Callable[[], datetime]] = None,
                   publisher: Optional[EventPublisher] = None,
                   load_seed_data: Optional[bool] = None) -> OpsStore:
    """Build a session store wired from configuration.

    With seed data enabled the store starts from the dashboard's initial
    notifications and task board, and the first escalation cycle has already
    run when this returns.
    """
    config = config or Config()
    id_generator = id_generator or build_id_generator(config.id_strategy)
    factory = IncidentFactory(
        id_generator=id_generator,
        clock=clock,
        critical_sla_minutes=config.critical_sla_minutes,
        high_sla_minutes=config.high_sla_minutes
    )
    metrics = EphemeralMetrics(namespace=config.metrics_namespace, service=config.service_name)

    load_seed_data = config.load_seed_data if load_seed_data is None else load_seed_data
    snapshot = OpsSnapshot(task_columns=initial_task_columns()) if load_seed_data else OpsSnapshot()

    store = OpsStore(
        factory=factory,
        publisher=publisher or EventPublisher(config.service_name),
        metrics=metrics,
        id_generator=id_generator,
        notification_feed_limit=config.notification_feed_limit,
        snapshot=snapshot
    )

    if load_seed_data:
        store.ingest_notifications(initial_notification_payloads())

    logger.info("Session created", extra={
        "environment": config.environment,
        "incidents": len(store.list_incidents()),
        "notifications": len(store.list_notifications())
    })

    return store
