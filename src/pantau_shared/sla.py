"""SLA deadline arithmetic for incidents."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from pantau_shared.models import Incident
from pantau_shared.utils import utc_now


@dataclass(frozen=True)
class SlaCountdown:
    """Time left until (or elapsed since) an incident's SLA deadline."""

    overdue: bool
    hours: int
    minutes: int
    deadline: datetime

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes


def sla_deadline(created_at: datetime, sla_minutes: int) -> datetime:
    return created_at + timedelta(minutes=sla_minutes)


def countdown(incident: Incident, now: Optional[datetime] = None) -> SlaCountdown:
    """Compute the SLA countdown of ``incident`` at ``now`` (default: current UTC time).

    The magnitude is floored to whole minutes. Nothing is cached; call again on
    every refresh.
    """
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    deadline = sla_deadline(incident.created_at, incident.sla_minutes)
    overdue = now > deadline
    whole_minutes = int(abs((deadline - now).total_seconds()) // 60)
    hours, minutes = divmod(whole_minutes, 60)
    return SlaCountdown(overdue=overdue, hours=hours, minutes=minutes, deadline=deadline)


def format_countdown(value: SlaCountdown) -> str:
    """Render a countdown the way the incident board shows it."""
    duration = f"{value.hours}j {value.minutes}m"
    return f"Terlambat {duration}" if value.overdue else f"Sisa {duration}"
