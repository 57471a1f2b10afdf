"""Status-driven alert generation for the notification feed."""

from .app import (
    AlertTriggerEngine,
    should_create_hospital_critical_alert,
    should_create_stock_critical_alert
)

__all__ = [
    "AlertTriggerEngine",
    "should_create_hospital_critical_alert",
    "should_create_stock_critical_alert"
]
