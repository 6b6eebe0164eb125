"""Unit tests for custom exception hierarchy"""
import logging
from datetime import datetime

from aura_quest.exceptions import (
    AuraQuestError,
    ConfigurationError,
    QuestNotFoundError,
    RecordNotFoundError,
    SuggestionNotFoundError,
    ValidationError,
)


class TestAuraQuestError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        error = AuraQuestError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        error = AuraQuestError(
            message="Accept failed",
            operation="accept_suggestion",
            context={"suggestion_id": 7},
            user_message="Could not accept the suggestion"
        )
        assert error.operation == "accept_suggestion"
        assert error.context["suggestion_id"] == 7
        assert error.user_message == "Could not accept the suggestion"

    def test_to_dict(self):
        error = AuraQuestError("Boom", request_id="req-1")
        data = error.to_dict()

        assert data["error"] == "AuraQuestError"
        assert data["message"] == "Boom"
        assert data["request_id"] == "req-1"
        assert "timestamp" in data

    def test_logs_on_creation(self, caplog):
        with caplog.at_level(logging.ERROR, logger="aura_quest.exceptions"):
            AuraQuestError("Logged failure")

        assert "Logged failure" in caplog.text

    def test_cause_kept(self):
        cause = ValueError("bad")
        error = AuraQuestError("Wrapped", cause=cause)

        assert error.cause is cause


class TestLookupErrors:
    """Test not-found errors"""

    def test_quest_not_found(self):
        error = QuestNotFoundError(42)

        assert isinstance(error, RecordNotFoundError)
        assert error.record_type == "Quest"
        assert error.record_id == 42
        assert error.user_message == "Quest not found."

    def test_suggestion_not_found(self):
        error = SuggestionNotFoundError(7, operation="accept_suggestion")

        assert error.record_type == "Suggestion"
        assert error.operation == "accept_suggestion"
        assert "7" in error.message

    def test_not_found_logged_as_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="aura_quest.exceptions"):
            QuestNotFoundError(1)

        assert caplog.records[-1].levelno == logging.WARNING


class TestValidationError:

    def test_field_in_user_message(self):
        error = ValidationError("must be one of default, cute, minimal", field="avatar_style", value="x")

        assert error.user_message.startswith("Invalid avatar_style")
        assert error.context == {"field": "avatar_style", "value": "x"}


class TestConfigurationError:

    def test_config_key(self):
        error = ConfigurationError("Missing", config_key="REDIS_URL")

        assert error.config_key == "REDIS_URL"
        assert "configured" in error.user_message
