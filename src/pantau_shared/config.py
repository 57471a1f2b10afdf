"""Configuration management for Pantau Ops sessions."""

import os
from typing import Optional
from aws_lambda_powertools import Logger
from pantau_shared.constants import (
    DEFAULT_CRITICAL_SLA_MINUTES,
    DEFAULT_HIGH_SLA_MINUTES,
    METRICS_NAMESPACE
)

logger = Logger()


class Config:
    """Configuration class for an operations session."""
    
    def __init__(self):
        """Initialize configuration from environment variables."""
        # Environment
        self.environment = self._get_env("ENVIRONMENT", "dev")
        self.service_name = self._get_env("SERVICE_NAME", "pantau-ops")
        
        # Metrics
        self.metrics_namespace = self._get_env("METRICS_NAMESPACE", METRICS_NAMESPACE)
        
        # SLA budgets
        self.critical_sla_minutes = int(
            self._get_env("CRITICAL_SLA_MINUTES", str(DEFAULT_CRITICAL_SLA_MINUTES))
        )
        self.high_sla_minutes = int(
            self._get_env("HIGH_SLA_MINUTES", str(DEFAULT_HIGH_SLA_MINUTES))
        )
        
        # Notification feed
        self.notification_feed_limit = int(self._get_env("NOTIFICATION_FEED_LIMIT", "0"))
        
        # Session bootstrap
        self.id_strategy = self._get_env("ID_STRATEGY", "uuid").lower()
        self.load_seed_data = self._get_env("LOAD_SEED_DATA", "true").lower() == "true"
        
        # Log the configuration
        logger.info(
            "Configuration loaded",
            extra={
                "environment": self.environment,
                "service_name": self.service_name,
                "critical_sla_minutes": self.critical_sla_minutes,
                "high_sla_minutes": self.high_sla_minutes,
                "notification_feed_limit": self.notification_feed_limit,
                "id_strategy": self.id_strategy,
                "load_seed_data": self.load_seed_data
            }
        )
    
    def _get_env(self, key: str, default: Optional[str] = None) -> str:
        """Get environment variable with optional default."""
        value = os.environ.get(key, default)
        if value is None:
            raise ValueError(f"Required environment variable {key} is not set")
        return value
