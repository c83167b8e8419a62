import logging

from csv_processor.observability.log_utils import log_failure, preview


def test_preview_decodes_bytes() -> None:
    assert preview(b'{"JobId": "1"}') == '{"JobId": "1"}'
    assert preview(b"\xff") == "�"


def test_preview_summarizes_collections() -> None:
    assert preview({"a": 1, "b": 2}) == "dict(2 keys)"
    assert preview([1, 2, 3]) == "list(3 items)"
    assert preview(None) == "None"


def test_preview_truncates_long_values() -> None:
    text = preview("x" * 600, max_length=10)

    assert text == "xxxxxxxxxx... (600 chars)"


def test_log_failure_records_error_fields(caplog) -> None:
    logger = logging.getLogger("tests.log_failure")

    with caplog.at_level(logging.ERROR, logger="tests.log_failure"):
        log_failure(logger, "Import failed", KeyError("k"), job_id="j-1")

    record = caplog.records[0]
    assert record.message == "Import failed"
    assert record.error_type == "KeyError"
    assert record.job_id == "j-1"
    assert record.exc_info is not None
