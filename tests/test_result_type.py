"""Tests for the Result type, error codes and the exception hierarchy."""

import logging

from services import error_codes
from services.errors import (
    AlreadyResolved,
    GritError,
    InsufficientFunds,
    NotFound,
    PrecedentMissing,
)
from services.result import Result


class TestResultOk:
    """Tests for successful Result creation."""

    def test_ok_without_value(self):
        """Result.ok() creates success without value."""
        result = Result.ok()
        assert result.success is True
        assert result.value is None
        assert result.error is None

    def test_ok_with_value(self):
        """Result.ok(value) creates success with value."""
        result = Result.ok({"balance": 500})
        assert result.value["balance"] == 500
        assert bool(result) is True


class TestResultFail:
    """Tests for failed Result creation."""

    def test_fail_with_code(self):
        """Result.fail(msg, code) creates failure with code."""
        result = Result.fail("Offer not found", code=error_codes.NOT_FOUND)
        assert result.success is False
        assert result.error == "Offer not found"
        assert result.error_code == error_codes.NOT_FOUND
        assert bool(result) is False

    def test_from_error_keeps_code(self):
        """Converting a GritError keeps its message and code."""
        result = Result.from_error(InsufficientFunds("Balance 10 is below 20"))
        assert result.error == "Balance 10 is below 20"
        assert result.error_code == error_codes.INSUFFICIENT_FUNDS

    def test_from_plain_exception(self):
        """Exceptions without a code convert with error_code None."""
        result = Result.from_error(RuntimeError("boom"))
        assert result.error == "boom"
        assert result.error_code is None


class TestResultMethods:
    """or_fallback and map."""

    def test_or_fallback_keeps_success(self, caplog):
        """A successful value wins and nothing is logged."""
        log = logging.getLogger("grit_core.tests.result")
        with caplog.at_level("WARNING", logger="grit_core.tests.result"):
            assert Result.ok(1).or_fallback(2, log, "Prop line") == 1
        assert caplog.text == ""

    def test_or_fallback_logs_failure(self, caplog):
        """A failure returns the fallback and logs its code and reason."""
        log = logging.getLogger("grit_core.tests.result")
        failure = Result.fail("model timed out", code=error_codes.AI_UNAVAILABLE)
        with caplog.at_level("WARNING", logger="grit_core.tests.result"):
            assert failure.or_fallback(2, log, "Redemption bet") == 2
        assert "Redemption bet unavailable" in caplog.text
        assert error_codes.AI_UNAVAILABLE in caplog.text
        assert "model timed out" in caplog.text

    def test_map_transforms_success(self):
        """map wraps the transformed value in a new success."""
        result = Result.ok(100).map(lambda v: v * 2)
        assert result.success
        assert result.value == 200

    def test_map_short_circuits_failure(self):
        """map returns the failure unchanged without calling the function."""
        failure = Result.fail("bad", code=error_codes.AI_PARSE_ERROR)
        assert failure.map(lambda v: 1 / 0) is failure


class TestErrors:
    """The GritError hierarchy."""

    def test_errors_are_value_errors(self):
        """Every settlement error is a ValueError."""
        assert issubclass(GritError, ValueError)
        assert isinstance(NotFound("x"), ValueError)

    def test_subclass_codes(self):
        """Each subclass carries its own code."""
        assert AlreadyResolved("x").code == error_codes.ALREADY_RESOLVED
        assert PrecedentMissing("x").code == error_codes.PRECEDENT_MISSING

    def test_code_override(self):
        """An explicit code overrides the class default."""
        err = GritError("not locked", code=error_codes.NOT_IN_GULAG)
        assert err.code == error_codes.NOT_IN_GULAG
        assert GritError("plain").code == error_codes.VALIDATION_ERROR
