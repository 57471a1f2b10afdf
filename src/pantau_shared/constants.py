"""Shared constants for the Pantau Ops platform."""

# Event Sources
EVENT_SOURCE_NOTIFICATIONS = "pantau.notifications"
EVENT_SOURCE_INCIDENTS = "pantau.incidents"
EVENT_SOURCE_TASKS = "pantau.tasks"

# Event Detail Types
EVENT_TYPE_NOTIFICATION_RECEIVED = "Notification Received"
EVENT_TYPE_NOTIFICATION_LIFECYCLE_CHANGED = "Notification Lifecycle Changed"
EVENT_TYPE_INCIDENT_DECLARED = "Incident Declared"
EVENT_TYPE_STATUS_CHANGED = "Incident Status Changed"
EVENT_TYPE_TASK_CREATED = "Follow-up Task Created"
EVENT_TYPE_TRANSITION_REJECTED = "Transition Rejected"

# ID Prefixes
ID_PREFIX_NOTIFICATION = "NTF"
ID_PREFIX_INCIDENT = "INC"
ID_PREFIX_TASK = "TI"

# Notification Severities
SEVERITY_RENDAH = "Rendah"
SEVERITY_SEDANG = "Sedang"
SEVERITY_TINGGI = "Tinggi"
SEVERITY_KRITIS = "Kritis"

# Notification Lifecycle
LIFECYCLE_NEW = "new"
LIFECYCLE_ACKNOWLEDGED = "acknowledged"
LIFECYCLE_ESCALATED = "escalated"
LIFECYCLE_RESOLVED = "resolved"

# Incident Statuses
STATUS_OPEN = "open"
STATUS_TRIAGE = "triage"
STATUS_IN_PROGRESS = "in-progress"
STATUS_RESOLVED = "resolved"
STATUS_CLOSED = "closed"

# Operational modules a notification can be routed to
MODULE_MEDICAL_SERVICES = "Pelayanan Medis"
MODULE_LOGISTICS_AND_STOCK = "Logistik & Stok"
MODULE_DISTRIBUTION = "Distribusi"
MODULE_SCHEDULE_AND_TASKS = "Jadwal & Tugas"

# Task board columns
TASK_COLUMN_NEW = "Tugas Baru"
TASK_COLUMN_IN_PROGRESS = "Sedang Dikerjakan"
TASK_COLUMN_DONE = "Selesai"
TASK_COLUMNS = (TASK_COLUMN_NEW, TASK_COLUMN_IN_PROGRESS, TASK_COLUMN_DONE)

# SLA budgets (minutes)
DEFAULT_CRITICAL_SLA_MINUTES = 60
DEFAULT_HIGH_SLA_MINUTES = 180

# Default responder groups
TEAM_PRIORITY_RESPONSE = "priority incident response team"
TEAM_MEDICAL_OPERATIONS = "medical operations team"
TEAM_COORDINATION = "coordination team"

# Notification age labels
AGE_LABEL_JUST_NOW = "Baru saja"
AGE_LABEL_MINUTES_SUFFIX = "menit yang lalu"
AGE_LABEL_ONE_HOUR = "1 jam yang lalu"

# Quick action fallback label
DEFAULT_ACTION_LABEL = "Tindak cepat"

# Metrics
METRICS_NAMESPACE = "PantauOps"
