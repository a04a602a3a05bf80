import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

def log_event(
    action: str,
    details: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None
):
    """
    Log a roster event to the application logger
    """
    log_message = f"Action: {action}"
    if user_id:
        log_message += f" | User: {user_id}"
    if details:
        log_message += f" | Details: {details}"

    logger.info(log_message)

def log_error(message: str, error: Exception, user_id: Optional[str] = None):
    """
    Log an error with context
    """
    error_message = f"Error: {message} | Exception: {str(error)}"
    if user_id:
        error_message += f" | User: {user_id}"

    logger.error(error_message)

def log_warning(message: str, user_id: Optional[str] = None):
    """
    Log a warning
    """
    warning_message = f"Warning: {message}"
    if user_id:
        warning_message += f" | User: {user_id}"

    logger.warning(warning_message)

# Event type constants for consistency
class EventTypes:
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    CUSTOM_TOKEN_ISSUED = "custom_token_issued"
    PROFILE_CREATED = "profile_created"

    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"

    SKILL_CREATED = "skill_created"
    SKILL_UPDATED = "skill_updated"
    SKILL_DELETED = "skill_deleted"

    SR_ASSIGNED = "sr_assigned"
    SR_FORCE_ASSIGNED = "sr_force_assigned"
    SR_RESET = "sr_reset"

    VACATION_ADDED = "vacation_added"
    VACATION_REMOVED = "vacation_removed"

    SUBSCRIPTION_FAILED = "subscription_failed"
