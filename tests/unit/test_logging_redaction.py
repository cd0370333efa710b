import logging

from p2p_desk.core.logging import get_logger, setup_logging
from p2p_desk.utils.logging_redaction import RedactingFilter, redact_message


def test_google_api_key_redacted():
    key = "AIza" + "B" * 35
    assert key not in redact_message(f"calling advisor with {key}")


def test_header_and_query_key_redacted():
    assert redact_message("x-goog-api-key: secret123") == "x-goog-api-key=[REDACTED]"
    assert "secret123" not in redact_message("GET /models?key=secret123")


def test_bearer_token_redacted():
    assert redact_message("Authorization: Bearer abc.def") == "Authorization: Bearer [REDACTED]"


def test_filter_rewrites_record_args():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "key %s", ("api_key=zzz",), None)
    assert RedactingFilter().filter(record)
    assert record.getMessage() == "key api_key=[REDACTED]"


def test_setup_logging_installs_filter():
    root = logging.getLogger()
    setup_logging("debug")
    try:
        assert any(isinstance(f, RedactingFilter) for f in root.filters)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for target in [root, *root.handlers]:
            for f in [f for f in target.filters if isinstance(f, RedactingFilter)]:
                target.removeFilter(f)


def test_get_logger_is_namespaced():
    assert get_logger("p2p_desk.main") is logging.getLogger("p2p_desk.main")


def test_filter_passes_records_with_bad_args():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "%d trades", ("many",), None)
    assert RedactingFilter().filter(record)
    assert record.args == ("many",)
