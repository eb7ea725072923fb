"""
Structured logging and audit trail tests.
"""

import io
import json
import logging
import uuid

from plotnft.config import get_config_manager
from plotnft.observability import (
    AuditLogger,
    Component,
    LogLevel,
    PlotLogger,
    StructuredHandler,
    get_correlation_id,
    set_correlation_id,
)
from plotnft.registry import PlotRegistry


def _fresh_logger(log_format: str = "json", level: LogLevel = LogLevel.DEBUG):
    stream = io.StringIO()
    name = f"test-{uuid.uuid4().hex[:8]}"
    return PlotLogger(name, Component.REGISTRY, level=level, log_format=log_format, stream=stream), stream


class TestPlotLogger:

    def test_json_lines(self):
        logger, stream = _fresh_logger()
        token = set_correlation_id("corr-test")
        try:
            logger.warning("mint rejected", operation="mint", error_code="INVALID_LOCATION", token_id=4)
        finally:
            from plotnft.observability import correlation_id_var
            correlation_id_var.reset(token)

        line = json.loads(stream.getvalue().strip())
        assert line["level"] == "warning"
        assert line["message"] == "mint rejected"
        assert line["component"] == "registry"
        assert line["operation"] == "mint"
        assert line["error_code"] == "INVALID_LOCATION"
        assert line["correlation_id"] == "corr-test"
        assert line["context"] == {"token_id": 4}

    def test_text_format(self):
        logger, stream = _fresh_logger(log_format="text")
        logger.info("hello")
        assert " - INFO - hello" in stream.getvalue()

    def test_level_filtering(self):
        logger, stream = _fresh_logger(level=LogLevel.WARNING)
        logger.info("quiet")
        assert stream.getvalue() == ""

    def test_error_with_exception(self):
        logger, stream = _fresh_logger()
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            logger.error("failed", error_code="E1", exc_info=True)
        line = json.loads(stream.getvalue().strip())
        assert "RuntimeError: kaboom" in line["exception"]

    def test_correlation_id_generated_once(self):
        first = get_correlation_id()
        assert first.startswith("corr-")
        assert get_correlation_id() == first


class TestAuditLogger:

    def test_chain_grows_and_verifies(self):
        logger, _ = _fresh_logger()
        audit = AuditLogger(logger)
        assert audit.last_hash == "genesis"

        audit.log("ST1", "mint", "plot", "1", "success")
        first = audit.last_hash
        audit.log("ST2", "burn", "plot", "1", "failure", error_code=100)

        assert first != "genesis"
        assert audit.last_hash != first
        assert len(audit.entries) == 2
        assert audit.verify() is True

    def test_tampering_detected(self):
        logger, _ = _fresh_logger()
        audit = AuditLogger(logger)
        audit.log("ST1", "mint", "plot", "1", "success")
        audit.log("ST1", "transfer", "plot", "1", "success")

        event, _ = audit.entries[0]
        event.outcome = "failure"
        assert audit.verify() is False


class TestRegistryLogging:

    def test_rejection_logged_with_code(self, caplog):
        registry = PlotRegistry("ST1TEST")
        with caplog.at_level(logging.INFO, logger="plotnft"):
            registry.burn("ST1TEST", 7)

        records = [r for r in caplog.records if getattr(r, "operation", "") == "burn"]
        assert records
        assert records[0].levelno == logging.WARNING
        assert records[0].error_code == "TOKEN_NOT_FOUND"

    def test_audit_records_every_call(self):
        registry = PlotRegistry("ST1TEST")
        registry.configure_authority("ST9", "ST2")
        registry.configure_authority("ST1TEST", "ST2")

        outcomes = [(e.action, e.outcome, e.resource_type) for e, _ in registry.audit.entries]
        assert outcomes == [
            ("configure_authority", "failure", "settings"),
            ("configure_authority", "success", "settings"),
        ]
        assert registry.audit.verify()

    def test_log_format_change_applies_to_next_registry(self):
        name = "plotnft.registry.plots"
        PlotRegistry("ST1TEST")
        assert [type(h) for h in logging.getLogger(name).handlers] == [StructuredHandler]

        get_config_manager().set("observability.log_format", "text")
        PlotRegistry("ST1TEST")
        assert [type(h) for h in logging.getLogger(name).handlers] == [logging.StreamHandler]

        get_config_manager().set("observability.log_format", "json")
        PlotRegistry("ST1TEST")
        assert [type(h) for h in logging.getLogger(name).handlers] == [StructuredHandler]
