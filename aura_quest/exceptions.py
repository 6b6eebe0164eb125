"""
Standardized exception hierarchy for aura-quest
Provides rich context, consistent logging, and user-friendly error messages

The progression core never raises these for bad stored data; they are used at
the edges (HTTP surface, configuration, explicit lookups).
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class AuraQuestError(Exception):
    """
    Base exception for all aura-quest errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise AuraQuestError(
            message="Failed to accept suggestion",
            operation="accept_suggestion",
            context={"suggestion_id": 1700000000000}
        )
    """

    log_level = logging.ERROR

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.log(self.log_level, f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.log(self.log_level, f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(AuraQuestError):
    """
    Raised when user input fails validation

    Example:
        raise ValidationError(
            message="Unknown avatar style",
            field="avatar_style",
            value="sparkly"
        )
    """

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Lookup Errors
# ==========================================

class RecordNotFoundError(AuraQuestError):
    """Requested record does not exist"""

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[Any] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


class QuestNotFoundError(RecordNotFoundError):
    """No quest with the given id in the current list"""

    def __init__(self, quest_id: int, **kwargs):
        super().__init__(
            message=f"Quest {quest_id} not found",
            record_type="Quest",
            record_id=quest_id,
            **kwargs
        )


class SuggestionNotFoundError(RecordNotFoundError):
    """No pending suggestion with the given id"""

    def __init__(self, suggestion_id: int, **kwargs):
        super().__init__(
            message=f"Suggestion {suggestion_id} not found",
            record_type="Suggestion",
            record_id=suggestion_id,
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(AuraQuestError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )
