"""
Tests for the exception hierarchy and ack/nack classification.

System role: Verification of error taxonomy
"""

import pytest

from csv_processor.core.exceptions import (
    BadRequestError,
    BlobStorageError,
    BrokerError,
    CsvProcessorException,
    InternalError,
    MessageParseError,
    NotFoundError,
    ProcessingOutcome,
    classify_exception,
    should_requeue,
)


class TestExceptionHierarchy:
    def test_status_codes(self) -> None:
        assert BadRequestError("x").status_code == 400
        assert NotFoundError("x").status_code == 404
        assert InternalError("x").status_code == 500

    def test_storage_and_broker_errors_are_internal(self) -> None:
        assert isinstance(BlobStorageError("x"), InternalError)
        assert isinstance(BrokerError("x"), InternalError)

    def test_context_is_kept_in_details(self) -> None:
        assert BadRequestError("x", field="file").details == {"field": "file"}
        assert NotFoundError("x", resource="job").details == {"resource": "job"}
        assert BlobStorageError("x", file_name="f.csv").details == {"file_name": "f.csv"}
        assert BrokerError("x", destination="q").details == {"destination": "q"}

    def test_str_includes_details(self) -> None:
        assert str(CsvProcessorException("boom", {"a": 1})) == "boom | Details: {'a': 1}"
        assert str(CsvProcessorException("boom")) == "boom"


class TestClassification:
    @pytest.mark.parametrize(
        ("exc", "outcome"),
        [
            (MessageParseError("bad"), ProcessingOutcome.POISON),
            (BadRequestError("empty"), ProcessingOutcome.CLIENT_ERROR),
            (NotFoundError("gone"), ProcessingOutcome.NOT_FOUND),
            (BlobStorageError("down"), ProcessingOutcome.TRANSIENT_FAILURE),
            (RuntimeError("db"), ProcessingOutcome.TRANSIENT_FAILURE),
        ],
    )
    def test_classify_exception(self, exc: Exception, outcome: ProcessingOutcome) -> None:
        assert classify_exception(exc) is outcome

    def test_only_success_and_poison_are_acked(self) -> None:
        acked = {o for o in ProcessingOutcome if not should_requeue(o)}

        assert acked == {ProcessingOutcome.SUCCESS, ProcessingOutcome.POISON}
