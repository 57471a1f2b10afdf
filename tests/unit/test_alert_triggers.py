"""
Unit tests for alert triggers and notification age labels
"""

import pytest

from alert_triggers.app import (
    AlertTriggerEngine,
    should_create_hospital_critical_alert,
    should_create_stock_critical_alert
)
from pantau_shared.models import HospitalStatus, Severity, StockStatus
from pantau_shared.utils import advance_age_label


class TestEdgeTriggers:
    """Test cases for critical-edge detection."""

    @pytest.mark.parametrize("previous,next_status,expected", [
        (HospitalStatus.NORMAL, HospitalStatus.KRITIS, True),
        (HospitalStatus.SIBUK, HospitalStatus.KRITIS, True),
        (HospitalStatus.KRITIS, HospitalStatus.KRITIS, False),
        (HospitalStatus.KRITIS, HospitalStatus.SIBUK, False),
        (HospitalStatus.NORMAL, HospitalStatus.SIBUK, False),
    ])
    def test_hospital_edge(self, previous, next_status, expected):
        """Test hospital alerts fire only on entry into Kritis."""
        assert should_create_hospital_critical_alert(previous, next_status) is expected

    @pytest.mark.parametrize("previous,next_status,expected", [
        (StockStatus.AMAN, StockStatus.KRITIS, True),
        (StockStatus.PERLU_PERHATIAN, StockStatus.KRITIS, True),
        (StockStatus.KRITIS, StockStatus.KRITIS, False),
        (StockStatus.KRITIS, StockStatus.AMAN, False),
    ])
    def test_stock_edge(self, previous, next_status, expected):
        """Test stock alerts fire only on entry into Kritis."""
        assert should_create_stock_critical_alert(previous, next_status) is expected

    def test_plain_strings_accepted(self):
        """Test status values may be given as strings."""
        assert should_create_hospital_critical_alert("Sibuk", "Kritis")
        assert not should_create_stock_critical_alert("Kritis", "Kritis")


class TestAlertTriggerEngine:
    """Test cases for the alert trigger engine."""

    @pytest.fixture
    def engine(self):
        return AlertTriggerEngine()

    @pytest.mark.parametrize("available,total,expected", [
        (10, 10, HospitalStatus.NORMAL),
        (4, 10, HospitalStatus.SIBUK),
        (2, 10, HospitalStatus.SIBUK),
        (1, 10, HospitalStatus.KRITIS),
        (0, 0, HospitalStatus.KRITIS),
    ])
    def test_classify_hospital(self, engine, available, total, expected):
        """Test occupancy thresholds."""
        assert engine.classify_hospital_status(available, total) == expected

    def test_classify_stock(self, engine):
        """Test the critical quantity threshold."""
        assert engine.classify_stock_status(14) == StockStatus.KRITIS
        assert engine.classify_stock_status(15) == StockStatus.PERLU_PERHATIAN

    def test_hospital_payload(self, engine):
        """Test hospital alert payload contents."""
        payload = engine.hospital_status_changed(
            "RS Lanud Halim", HospitalStatus.SIBUK, HospitalStatus.KRITIS
        )

        assert payload["priority"] == Severity.TINGGI.value
        assert payload["title"] == "Status Kritis: RS Lanud Halim"
        assert payload["location"] == "RS Lanud Halim"
        assert payload["actionLabel"] == "Aktifkan protokol IGD"
        assert payload["time"] == "Baru saja"

    def test_stock_payload(self, engine):
        """Test stock alert payload contents."""
        payload = engine.stock_status_changed(
            "Oksigen Medis", "12 tabung", StockStatus.PERLU_PERHATIAN, StockStatus.KRITIS
        )

        assert payload["priority"] == Severity.SEDANG.value
        assert payload["title"] == "Stok Kritis: Oksigen Medis"
        assert payload["description"] == "Stok tersisa 12 tabung. Segera pesan ulang."
        assert payload["location"] == "Gudang Pusat"

    def test_no_payload_without_edge(self, engine):
        """Test staying in Kritis produces nothing."""
        assert engine.hospital_status_changed("RS", HospitalStatus.KRITIS, HospitalStatus.KRITIS) is None
        assert engine.stock_status_changed("Oksigen", "5", StockStatus.KRITIS, StockStatus.KRITIS) is None

    def test_feed_escalates_hospital_alert(self, engine, store):
        """Test a hospital alert becomes an incident while a stock alert does not."""
        escalations = engine.feed(store, [
            engine.hospital_status_changed("RS Lanud Halim", "Sibuk", "Kritis"),
            engine.stock_status_changed("Oksigen", "5 tabung", "Aman", "Kritis"),
            None,
        ])

        assert len(store.list_notifications()) == 2
        assert len(escalations) == 1
        assert escalations[0].incident.title == "Status Kritis: RS Lanud Halim"
        assert escalations[0].incident.sla_minutes == 180

    def test_feed_nothing(self, engine, store):
        """Test an all-None feed touches nothing."""
        assert engine.feed(store, [None, None]) == []
        assert store.list_notifications() == []


class TestAgeLabels:
    """Test cases for notification age labels."""

    @pytest.mark.parametrize("label,expected", [
        ("Baru saja", "1 menit yang lalu"),
        ("1 menit yang lalu", "2 menit yang lalu"),
        ("45 menit yang lalu", "46 menit yang lalu"),
        ("59 menit yang lalu", "1 jam yang lalu"),
        ("1 jam yang lalu", "1 jam yang lalu"),
        ("3 jam yang lalu", "3 jam yang lalu"),
    ])
    def test_advance(self, label, expected):
        """Test labels advance one minute at a time."""
        assert advance_age_label(label) == expected
