"""
Alert Triggers
Turns hospital and stock status changes into notifications for the escalation
pipeline. Alerts fire on the edge into a critical status only.
"""

from typing import Dict, Any, List, Optional
from aws_lambda_powertools import Logger

# Import shared modules
from pantau_shared.models import (
    HospitalStatus,
    IncidentEscalation,
    Severity,
    StockStatus
)
from pantau_shared.constants import AGE_LABEL_JUST_NOW

logger = Logger()


def should_create_hospital_critical_alert(previous_status, next_status) -> bool:
    """True only when a hospital enters the Kritis state."""
    return previous_status != HospitalStatus.KRITIS and next_status == HospitalStatus.KRITIS


def should_create_stock_critical_alert(previous_status, next_status) -> bool:
    """True only when a stock item enters the Kritis state."""
    return previous_status != StockStatus.KRITIS and next_status == StockStatus.KRITIS


class AlertTriggerEngine:
    """Engine for status-driven alert generation."""

    def __init__(self):
        """Initialize trigger engine with rules."""
        self.hospital_rules = self._load_hospital_rules()
        self.stock_rules = self._load_stock_rules()

    def _load_hospital_rules(self) -> Dict[str, Any]:
        """Load hospital occupancy thresholds and alert template."""
        return {
            "critical_occupancy_percent": 85.0,
            "busy_occupancy_percent": 60.0,
            "alert": {
                "priority": Severity.TINGGI.value,
                "title": "Status Kritis: {name}",
                "description": "Kapasitas IGD & tempat tidur sangat terbatas.",
                "actionLabel": "Aktifkan protokol IGD"
            }
        }

    def _load_stock_rules(self) -> Dict[str, Any]:
        """Load stock thresholds and alert template."""
        return {
            "critical_quantity_below": 15,
            "alert": {
                "priority": Severity.SEDANG.value,
                "title": "Stok Kritis: {name}",
                "description": "Stok tersisa {stock}. Segera pesan ulang.",
                "location": "Gudang Pusat",
                "actionLabel": "Buat permintaan pengadaan"
            }
        }

    def classify_hospital_status(self, available_beds: int, total_beds: int) -> HospitalStatus:
        """Derive the IGD status from bed occupancy."""
        if total_beds <= 0:
            return HospitalStatus.KRITIS
        occupancy = (total_beds - available_beds) / total_beds * 100
        if occupancy >= self.hospital_rules["critical_occupancy_percent"]:
            return HospitalStatus.KRITIS
        if occupancy >= self.hospital_rules["busy_occupancy_percent"]:
            return HospitalStatus.SIBUK
        return HospitalStatus.NORMAL

    def classify_stock_status(self, quantity: int) -> StockStatus:
        """Derive the stock status from the remaining quantity."""
        if quantity < self.stock_rules["critical_quantity_below"]:
            return StockStatus.KRITIS
        return StockStatus.PERLU_PERHATIAN

    def hospital_status_changed(self, hospital_name: str, previous_status,
                                next_status) -> Optional[Dict[str, Any]]:
        """Notification payload for a hospital status change, if it warrants one."""
        if not should_create_hospital_critical_alert(previous_status, next_status):
            return None

        template = self.hospital_rules["alert"]
        payload = {
            "priority": template["priority"],
            "title": template["title"].format(name=hospital_name),
            "time": AGE_LABEL_JUST_NOW,
            "description": template["description"],
            "location": hospital_name,
            "actionLabel": template["actionLabel"]
        }

        logger.info("Hospital critical alert triggered", extra={
            "hospital": hospital_name,
            "previous_status": getattr(previous_status, "value", previous_status),
            "next_status": getattr(next_status, "value", next_status)
        })

        return payload

    def stock_status_changed(self, item_name: str, stock_label: str, previous_status,
                             next_status) -> Optional[Dict[str, Any]]:
        """Notification payload for a stock status change, if it warrants one."""
        if not should_create_stock_critical_alert(previous_status, next_status):
            return None

        template = self.stock_rules["alert"]
        payload = {
            "priority": template["priority"],
            "title": template["title"].format(name=item_name),
            "time": AGE_LABEL_JUST_NOW,
            "description": template["description"].format(stock=stock_label),
            "location": template["location"],
            "actionLabel": template["actionLabel"]
        }

        logger.info("Stock critical alert triggered", extra={
            "item": item_name,
            "stock": stock_label
        })

        return payload

    def feed(self, store, payloads: List[Optional[Dict[str, Any]]]) -> List[IncidentEscalation]:
        """Push generated payloads into a session store; ``None`` entries are skipped."""
        pending = [payload for payload in payloads if payload is not None]
        if not pending:
            return []

        escalations = store.ingest_notifications(pending)

        logger.info(f"Fed {len(pending)} alerts into the session", extra={
            "escalations": len(escalations)
        })

        return escalations
