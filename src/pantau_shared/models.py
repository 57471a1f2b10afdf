"""Data models for the Pantau Ops platform."""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Dict, Tuple, FrozenSet
from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator
from pantau_shared.constants import (
    SEVERITY_RENDAH,
    SEVERITY_SEDANG,
    SEVERITY_TINGGI,
    SEVERITY_KRITIS,
    LIFECYCLE_NEW,
    LIFECYCLE_ACKNOWLEDGED,
    LIFECYCLE_ESCALATED,
    LIFECYCLE_RESOLVED,
    STATUS_OPEN,
    STATUS_TRIAGE,
    STATUS_IN_PROGRESS,
    STATUS_RESOLVED,
    STATUS_CLOSED,
    MODULE_MEDICAL_SERVICES,
    MODULE_LOGISTICS_AND_STOCK,
    MODULE_DISTRIBUTION,
    MODULE_SCHEDULE_AND_TASKS,
    AGE_LABEL_JUST_NOW,
    TASK_COLUMNS,
)


class Severity(str, Enum):
    """Notification severity enumeration, lowest first."""
    RENDAH = SEVERITY_RENDAH
    SEDANG = SEVERITY_SEDANG
    TINGGI = SEVERITY_TINGGI
    KRITIS = SEVERITY_KRITIS

    @property
    def rank(self) -> int:
        return list(Severity).index(self)


class NotificationLifecycle(str, Enum):
    """Notification lifecycle enumeration."""
    NEW = LIFECYCLE_NEW
    ACKNOWLEDGED = LIFECYCLE_ACKNOWLEDGED
    ESCALATED = LIFECYCLE_ESCALATED
    RESOLVED = LIFECYCLE_RESOLVED


class IncidentStatus(str, Enum):
    """Incident status enumeration."""
    OPEN = STATUS_OPEN
    TRIAGE = STATUS_TRIAGE
    IN_PROGRESS = STATUS_IN_PROGRESS
    RESOLVED = STATUS_RESOLVED
    CLOSED = STATUS_CLOSED


class TargetModule(str, Enum):
    """Operational module a notification or incident can be routed to."""
    MEDICAL_SERVICES = MODULE_MEDICAL_SERVICES
    LOGISTICS_AND_STOCK = MODULE_LOGISTICS_AND_STOCK
    DISTRIBUTION = MODULE_DISTRIBUTION
    SCHEDULE_AND_TASKS = MODULE_SCHEDULE_AND_TASKS


class HospitalStatus(str, Enum):
    """Emergency department (IGD) status of a hospital."""
    NORMAL = "Normal"
    SIBUK = "Sibuk"
    KRITIS = "Kritis"


class StockStatus(str, Enum):
    """Stock level status of an inventory item."""
    AMAN = "Aman"
    PERLU_PERHATIAN = "Perlu Perhatian"
    KRITIS = "Kritis"


class BaseEntity(BaseModel):
    """Base model for all entities. Records are immutable; changes go through model_copy."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Notification(BaseEntity):
    """Operational alert surfaced to staff."""
    id: str = Field(..., min_length=1, description="Unique notification identifier")
    severity: Severity = Field(..., alias="priority")
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    location: str = Field(default="")
    time: str = Field(default=AGE_LABEL_JUST_NOW, description="Human-readable age")
    action_label: Optional[str] = Field(None, alias="actionLabel")
    lifecycle: NotificationLifecycle = Field(default=NotificationLifecycle.NEW)
    category: Optional[TargetModule] = Field(None, description="Explicit routing tag")


class Incident(BaseEntity):
    """Tracked response record derived from an escalated notification."""
    id: str = Field(..., description="Unique incident identifier")
    title: str = Field(..., min_length=1, max_length=200)
    source_notification_id: str
    severity: Severity
    status: IncidentStatus = Field(default=IncidentStatus.OPEN)
    team: str
    created_at: AwareDatetime
    sla_minutes: int = Field(..., gt=0)

    @field_validator('id')
    @classmethod
    def validate_id(cls, v):
        """Validate incident ID format."""
        if not v.startswith('INC-'):
            raise ValueError('Incident ID must start with INC-')
        return v

    @property
    def deadline(self) -> datetime:
        return self.created_at + timedelta(minutes=self.sla_minutes)


class Task(BaseEntity):
    """Unit of work on the task board."""
    id: str
    title: str = Field(..., min_length=1)
    description: str = ""
    assignee: str
    due_date: date
    linked_incident_id: Optional[str] = None


class IncidentEscalation(BaseEntity):
    """Incident plus its paired follow-up task."""
    incident: Incident
    task: Task


class TransitionOutcome(BaseEntity):
    """Result of a lifecycle or status update request."""
    entity_id: str
    from_status: Optional[str] = None
    to_status: str
    applied: bool
    reason: str


class OpsSnapshot(BaseEntity):
    """Complete state of one session store at one point in time."""
    notifications: Tuple[Notification, ...] = ()
    incidents: Tuple[Incident, ...] = ()
    task_columns: Dict[str, Tuple[Task, ...]] = Field(
        default_factory=lambda: {column: () for column in TASK_COLUMNS}
    )
    processed_notification_ids: FrozenSet[str] = frozenset()


class CreateNotificationInput(BaseEntity):
    """Input model for the raw notification feed."""
    id: Optional[str] = None
    severity: Severity = Field(..., alias="priority")
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    location: str = ""
    time: str = AGE_LABEL_JUST_NOW
    action_label: Optional[str] = Field(None, alias="actionLabel")
    category: Optional[TargetModule] = None
