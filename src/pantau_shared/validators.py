"""Input validators for Pantau Ops."""

from typing import Dict, Any
from pydantic import ValidationError
from aws_lambda_powertools import Logger
from pantau_shared.models import (
    CreateNotificationInput,
    IncidentStatus,
    NotificationLifecycle,
    Severity
)
from pantau_shared.exceptions import ValidationError as PantauValidationError

logger = Logger()


def _raw(value) -> str:
    return str(getattr(value, "value", value)).strip()


def _format_errors(error: ValidationError) -> str:
    error_messages = [
        f"{err['loc'][0] if err['loc'] else 'input'}: {err['msg']}" for err in error.errors()
    ]
    return f"Invalid input: {', '.join(error_messages)}"


def validate_notification_input(data: Dict[str, Any]) -> CreateNotificationInput:
    """Validate a raw notification from the alert feed."""
    try:
        # Feeds send severities in any case, e.g. "kritis" or " Tinggi "
        for key in ("priority", "severity"):
            if data.get(key) is not None:
                data = {**data, key: validate_severity(data[key])}

        validated_input = CreateNotificationInput(**data)
        
        # Action labels are rendered as buttons; blank ones are dropped
        if validated_input.action_label is not None and not validated_input.action_label.strip():
            validated_input = validated_input.model_copy(update={"action_label": None})
        
        logger.info("Notification input validated successfully", extra={
            "title": validated_input.title,
            "severity": validated_input.severity.value
        })
        
        return validated_input
        
    except ValidationError as e:
        logger.error("Notification input validation failed", extra={"errors": e.errors()})
        raise PantauValidationError(_format_errors(e))
    except (TypeError, AttributeError) as e:
        raise PantauValidationError(f"Invalid input: {str(e)}")


def validate_severity(severity: str) -> Severity:
    """Validate severity value."""
    valid_severities = [item.value for item in Severity]
    
    normalized = _raw(severity).capitalize()
    if normalized not in valid_severities:
        raise PantauValidationError(f"Invalid severity. Must be one of: {', '.join(valid_severities)}")
    
    return Severity(normalized)


def validate_lifecycle(lifecycle: str) -> NotificationLifecycle:
    """Validate a notification lifecycle value."""
    try:
        return NotificationLifecycle(_raw(lifecycle).lower())
    except ValueError:
        valid_states = [item.value for item in NotificationLifecycle]
        raise PantauValidationError(f"Invalid lifecycle. Must be one of: {', '.join(valid_states)}")


def validate_incident_status(status: str) -> IncidentStatus:
    """Validate an incident status value."""
    try:
        return IncidentStatus(_raw(status).lower())
    except ValueError:
        valid_statuses = [item.value for item in IncidentStatus]
        raise PantauValidationError(f"Invalid status. Must be one of: {', '.join(valid_statuses)}")
