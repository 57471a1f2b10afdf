"""Alert escalation pipeline: eligibility, incident factory and session store."""

from .app import (
    IncidentFactory,
    OpsStore,
    create_session,
    infer_default_team,
    is_escalation_severity,
    select_escalation_candidates,
    sla_minutes_for
)

__all__ = [
    "IncidentFactory",
    "OpsStore",
    "create_session",
    "infer_default_team",
    "is_escalation_severity",
    "select_escalation_candidates",
    "sla_minutes_for"
]
