"""
Integration tests for the complete escalation workflow
"""

from datetime import date, timedelta

import pytest

from alert_triggers.app import AlertTriggerEngine
from escalation_pipeline.app import create_session
from ops_views.app import (
    count_incidents_by_status,
    filter_notifications,
    find_incident_for_notification,
    incident_countdown_label,
    run_one_click_action
)
from pantau_shared.config import Config
from pantau_shared.constants import (
    EVENT_TYPE_INCIDENT_DECLARED,
    EVENT_TYPE_TASK_CREATED,
    TASK_COLUMN_DONE,
    TASK_COLUMN_IN_PROGRESS,
    TASK_COLUMN_NEW
)
from pantau_shared.exceptions import SessionClosedError
from pantau_shared.models import IncidentStatus, NotificationLifecycle, Severity
from pantau_shared.utils import SequentialIdGenerator


@pytest.fixture
def config(monkeypatch):
    """Session configuration from a test environment."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("ID_STRATEGY", "sequential")
    monkeypatch.setenv("LOAD_SEED_DATA", "true")
    monkeypatch.delenv("NOTIFICATION_FEED_LIMIT", raising=False)
    monkeypatch.delenv("CRITICAL_SLA_MINUTES", raising=False)
    monkeypatch.delenv("HIGH_SLA_MINUTES", raising=False)
    return Config()


@pytest.fixture
def session(config, clock, publisher):
    """Seeded session store."""
    store = create_session(config, id_generator=SequentialIdGenerator(),
                           clock=clock, publisher=publisher)
    yield store
    store.close()


class TestSeededSession:
    """Test the session as the dashboard starts it."""

    def test_seed_notifications_newest_first(self, session):
        """Test the seed feed is loaded with generated ids, newest first."""
        notifications = session.list_notifications()

        assert [n.id for n in notifications] == ["NTF-0004", "NTF-0003", "NTF-0002", "NTF-0001"]
        assert notifications[0].title == "Kebutuhan Darah Segera"
        assert all(n.lifecycle == NotificationLifecycle.NEW for n in notifications)

    def test_seed_escalates_blood_request(self, session, clock):
        """Test the only Tinggi seed notification is escalated at startup."""
        incidents = session.list_incidents()

        assert len(incidents) == 1
        incident = incidents[0]
        assert incident.id == "INC-0005"
        assert incident.source_notification_id == "NTF-0004"
        assert incident.severity == Severity.TINGGI
        assert incident.team == "medical operations team"
        assert incident.sla_minutes == 180
        assert incident.created_at == clock()
        assert session.processed_notification_ids == frozenset({"NTF-0004"})

    def test_seed_task_board(self, session):
        """Test the follow-up task lands ahead of the seed tasks."""
        board = session.list_tasks_by_column()

        assert [t.id for t in board[TASK_COLUMN_NEW]] == ["TI-0005", "T1", "T2"]
        assert [t.id for t in board[TASK_COLUMN_IN_PROGRESS]] == ["T3"]
        assert [t.id for t in board[TASK_COLUMN_DONE]] == ["T4"]
        assert board[TASK_COLUMN_NEW][0].due_date == date(2025, 1, 1)

    def test_seed_events(self, session, publisher):
        """Test the startup escalation was announced."""
        detail_types = [event["detail-type"] for event in publisher.received]

        assert detail_types.count(EVENT_TYPE_INCIDENT_DECLARED) == 1
        assert detail_types.count(EVENT_TYPE_TASK_CREATED) == 1

    def test_without_seed_data(self, config, clock, publisher):
        """Test an empty session when seeding is disabled."""
        with create_session(config, clock=clock, publisher=publisher,
                            load_seed_data=False) as store:
            assert store.list_notifications() == []
            assert store.list_incidents() == []
            assert all(tasks == [] for tasks in store.list_tasks_by_column().values())


class TestOperationsFlow:
    """Test an operator's path from status change to incident closure."""

    def test_hospital_goes_critical(self, session, clock):
        """Test a hospital alert flows through escalation, views and status updates."""
        engine = AlertTriggerEngine()
        status = engine.classify_hospital_status(available_beds=1, total_beds=20)
        escalations = engine.feed(session, [
            engine.hospital_status_changed("RS Lanud Halim", "Sibuk", status)
        ])

        assert len(escalations) == 1
        notification = session.list_notifications()[0]
        assert notification.title == "Status Kritis: RS Lanud Halim"

        critical = filter_notifications(session.list_notifications(), critical_only=True)
        assert [n.id for n in critical] == [notification.id, "NTF-0004"]

        incident = find_incident_for_notification(session.list_incidents(), notification.id)
        assert session.list_incidents()[0] == incident

        clock.now = clock.now + timedelta(minutes=200)
        assert incident_countdown_label(incident, clock()) == "Terlambat 0j 20m"

        outcome = run_one_click_action(session, notification.id)
        assert outcome.lifecycle_applied
        assert outcome.message == "Aksi dijalankan: Aktifkan protokol IGD → Pelayanan Medis"

        for status_value in ["triage", "in-progress", "resolved", "closed"]:
            assert session.update_incident_status(incident.id, status_value).applied

        counts = count_incidents_by_status(session.list_incidents())
        assert counts[IncidentStatus.CLOSED] == 1
        assert counts[IncidentStatus.OPEN] == 1

        session.update_notification_lifecycle(notification.id, "resolved")
        assert notification.id not in {
            n.id for n in filter_notifications(session.list_notifications(), critical_only=True)
        }

    def test_cycles_are_idempotent(self, session):
        """Test repeated cycles and age ticks never add incidents."""
        for _ in range(10):
            session.tick_notification_ages()
            assert session.run_escalation_cycle() == []

        assert len(session.list_incidents()) == 1
        assert session.get_notification("NTF-0004").time == "25 menit yang lalu"

    def test_feed_limit_from_config(self, monkeypatch, clock, publisher):
        """Test the dashboard-sized feed keeps only the newest entries."""
        monkeypatch.setenv("NOTIFICATION_FEED_LIMIT", "3")
        monkeypatch.setenv("ID_STRATEGY", "sequential")
        with create_session(Config(), clock=clock, publisher=publisher,
                            load_seed_data=True) as store:
            assert [n.id for n in store.list_notifications()] == ["NTF-0004", "NTF-0003", "NTF-0002"]
            assert len(store.list_incidents()) == 1

    def test_closed_session(self, session):
        """Test the session refuses changes once closed."""
        session.close()

        with pytest.raises(SessionClosedError):
            session.tick_notification_ages()
        assert len(session.list_incidents()) == 1
