"""
Tests for logger functionality.
"""

from amihelper.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self):
        """Logger should be created with default settings."""
        logger = StructuredLogger(name="test", enable_console=False)

        assert logger.logger.name == "test"
        assert logger.metrics["lookups_attempted"] == 0
        assert logger.logger.handlers == []

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

        log_content = next(tmp_path.glob("*.log")).read_text()
        for level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            assert level in log_content

    def test_log_with_context(self, tmp_path):
        """Context is appended as JSON."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.info("Lookup complete", path="/aws/service/debian/release", pairs=5)

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert 'Lookup complete | Context: {"path": "/aws/service/debian/release", "pairs": 5}' in log_content

    def test_console_goes_to_stderr(self, capsys):
        """stdout is reserved for selected AMIs."""
        logger = StructuredLogger(name="test-console", level="INFO")
        logger.info("hello")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "hello" in captured.err

    def test_console_level_filters(self, capsys):
        logger = StructuredLogger(name="test-level", level="WARNING")
        logger.info("quiet")
        logger.warning("loud")

        captured = capsys.readouterr()
        assert "quiet" not in captured.err
        assert "loud" in captured.err

    def test_metrics_tracking(self):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(name="test", enable_console=False)

        logger.record_lookup_attempt("/aws/service/debian/release")
        logger.record_lookup_success("/aws/service/debian/release", 5)
        logger.record_lookup_attempt("/aws/service/canonical/ubuntu/server")
        logger.record_lookup_failure("/aws/service/canonical/ubuntu/server", "EndpointConnectionError")
        logger.record_family("Debian", fetched=5, selected=2)

        metrics = logger.get_metrics()

        assert metrics["lookups_attempted"] == 2
        assert metrics["lookups_successful"] == 1
        assert metrics["lookups_failed"] == 1
        assert metrics["parameters_fetched"] == 5
        assert metrics["errors_by_type"]["EndpointConnectionError"] == 1
        assert metrics["families"]["Debian"] == {"fetched": 5, "selected": 2}

    def test_get_metrics_returns_copy(self):
        logger = StructuredLogger(name="test", enable_console=False)
        metrics = logger.get_metrics()
        metrics["families"]["Ubuntu"] = {"fetched": 1, "selected": 1}

        assert logger.metrics["families"] == {}

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )
        logger.record_family("Ubuntu", fetched=5, selected=2)
        logger.record_lookup_failure("/x", "Timeout")
        logger.log_metrics_summary()

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert "Ubuntu: 2 of 5 selected" in log_content
        assert "Timeout: 1" in log_content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("amihelper_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()

    def test_configure_replaces_handlers(self, tmp_path):
        logger = StructuredLogger(name="test-reconfigure")
        assert len(logger.logger.handlers) == 1

        logger.configure("DEBUG", log_dir=tmp_path, enable_file=True)
        assert len(logger.logger.handlers) == 2


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self):
        """get_logger should return same instance."""
        reset_logger()

        logger1 = get_logger(enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(enable_console=False)
        logger1.record_lookup_attempt("/x")

        reset_logger()

        logger2 = get_logger(enable_console=False)

        assert logger2 is not logger1
        assert logger2.metrics["lookups_attempted"] == 0
