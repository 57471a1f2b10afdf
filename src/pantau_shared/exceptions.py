"""Custom exceptions for the Pantau Ops platform."""

class PantauError(Exception):
    """Base exception for the application."""
    pass

class ValidationError(PantauError):
    """For data validation errors on the raw notification feed."""
    pass

class NotificationNotFoundError(PantauError):
    """When a notification is not found in the session store."""
    pass

class IncidentNotFoundError(PantauError):
    """When an incident is not found in the session store."""
    pass

class SessionClosedError(PantauError):
    """When a closed session store is asked to change state."""
    pass
