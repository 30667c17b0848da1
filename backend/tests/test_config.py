"""
Tests for settings validation
"""
import pytest

from core.exceptions import ConfigurationException

from conftest import make_settings


class TestSettings:
    """Test configuration rules"""

    def test_defaults(self):
        config = make_settings()

        assert config.REMINDER_LEAD_TIME_MINUTES == 60
        assert config.REMINDER_BATCH_SIZE == 5
        assert config.REMINDER_POLL_INTERVAL_SECONDS == 60
        assert config.REMINDER_RESCHEDULE_ON_DEADLINE_CHANGE is True

    def test_email_backend_is_normalized(self):
        assert make_settings(EMAIL_BACKEND=" Console ").EMAIL_BACKEND == "console"

    def test_unknown_email_backend_rejected(self):
        with pytest.raises(ValueError):
            make_settings(EMAIL_BACKEND="carrier_pigeon")

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValueError):
            make_settings(REMINDER_BATCH_SIZE=0)

    def test_console_backend_needs_no_smtp(self):
        make_settings(EMAIL_BACKEND="console").validate_for_scheduler()

    def test_smtp_backend_lists_missing_keys(self):
        config = make_settings(EMAIL_BACKEND="smtp", SMTP_USER=None, SMTP_PASSWORD=None)

        with pytest.raises(ConfigurationException) as exc_info:
            config.validate_for_scheduler()

        assert "SMTP_USER" in exc_info.value.missing
        assert "SMTP_PASSWORD" in exc_info.value.missing
        assert "SMTP_FROM_EMAIL" in exc_info.value.missing

    def test_smtp_backend_complete(self):
        config = make_settings(
            EMAIL_BACKEND="smtp",
            SMTP_USER="tracker@example.com",
            SMTP_PASSWORD="app-password",
        )

        config.validate_for_scheduler()
        assert config.sender_email == "tracker@example.com"

    def test_empty_database_url_is_fatal(self):
        with pytest.raises(ConfigurationException) as exc_info:
            make_settings(DATABASE_URL="").validate_for_scheduler()

        assert exc_info.value.missing == ["DATABASE_URL"]

    @pytest.mark.parametrize("worker,secret,expected", [
        (True, None, True),
        (False, "cron-secret", True),
        (False, None, False),
    ])
    def test_scheduler_reachable(self, worker, secret, expected):
        config = make_settings(REMINDER_WORKER_ENABLED=worker, CRON_SECRET=secret)

        assert config.scheduler_reachable is expected
