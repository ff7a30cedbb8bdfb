"""
Tests for logger functionality.
"""

import pytest

from jobboard.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["remote_calls"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context is appended as JSON, non-serializable values as strings."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Row created", table="jobs", path=tmp_path)

        content = next(tmp_path.glob("*.log")).read_text()
        assert 'Row created | Context: {"table": "jobs", "path": ' in content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked per table and error type."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_remote_call("jobs")
        logger.record_remote_call("jobs")
        logger.record_remote_call("applications")
        logger.record_remote_failure("jobs", "HTTPError_500")
        logger.record_row_created("applications")
        logger.record_validation_failure("create_job")

        metrics = logger.get_metrics()

        assert metrics["remote_calls"] == 3
        assert metrics["remote_failures"] == 1
        assert metrics["rows_created"] == 1
        assert metrics["validation_failures"] == 1
        assert metrics["errors_by_type"] == {"HTTPError_500": 1, "validation:create_job": 1}
        assert metrics["table_calls"]["jobs"] == {"calls": 2, "failures": 1, "failure_rate": 0.5}
        assert metrics["table_calls"]["applications"]["failure_rate"] == 0.0

    def test_failure_rate_calculation(self, tmp_path):
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        for _ in range(3):
            logger.record_remote_call("jobs")
        logger.record_remote_failure("jobs", "Timeout")

        rate = logger.get_metrics()["table_calls"]["jobs"]["failure_rate"]
        assert rate == pytest.approx(0.333, rel=0.01)

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )
        logger.record_remote_call("jobs")
        logger.record_remote_failure("jobs", "Timeout")

        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "Remote calls: 0/1 (0.0% success)" in content
        assert "Timeout: 1" in content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1
        assert log_files[0].name.startswith("jobboard_")
        assert "Test message" in log_files[0].read_text()


class TestGlobalLogger:
    """Test global logger singleton."""

    @pytest.fixture(autouse=True)
    def fresh_global(self):
        reset_logger()
        yield
        reset_logger()

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        logger1 = get_logger(name="jobboard-test", enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self):
        """reset_logger should create new instance."""
        logger1 = get_logger(name="jobboard-test", enable_console=False)
        logger1.record_remote_call("jobs")

        reset_logger()

        logger2 = get_logger(name="jobboard-test", enable_console=False)

        assert logger2 is not logger1
        assert logger2.metrics["remote_calls"] == 0

    def test_file_output_only_with_log_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("JOBBOARD_LOG_DIR", raising=False)
        get_logger(name="jobboard-test", enable_console=False).info("quiet")
        assert list(tmp_path.glob("*.log")) == []

        reset_logger()
        monkeypatch.setenv("JOBBOARD_LOG_DIR", str(tmp_path))
        get_logger(name="jobboard-test", enable_console=False).info("to file")
        assert "to file" in next(tmp_path.glob("*.log")).read_text()

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("JOBBOARD_LOG_LEVEL", "warning")
        logger = get_logger(name="jobboard-test", enable_console=False)
        assert logger.logger.level == 30
