"""Unit tests for the exception hierarchy in src/core/exceptions.py."""

import pytest

from src.core.exceptions import (
    AnimalApiError,
    AuthError,
    ErrorCode,
    NotFoundError,
    OriginError,
    Severity,
    StoreError,
    ValidationError,
)


@pytest.mark.unit
class TestAnimalApiError:
    """Behaviour shared by every application error."""

    def test_accepts_enum_or_string_code(self) -> None:
        """Verify the error code is stored as its string value."""
        from_enum = AnimalApiError(ErrorCode.NOT_FOUND, "missing")
        from_str = AnimalApiError("CUSTOM", "custom")

        assert from_enum.error_code == "NOT_FOUND"
        assert from_str.error_code == "CUSTOM"

    def test_defaults(self) -> None:
        """Verify severity defaults to MEDIUM and context to an empty dict."""
        error = AnimalApiError(ErrorCode.INTERNAL_ERROR, "boom")

        assert error.severity is Severity.MEDIUM
        assert error.context == {}
        assert error.cause is None
        assert error.is_expected is True

    def test_str_and_repr(self) -> None:
        """Verify the string forms include code, message and context."""
        error = AnimalApiError(
            ErrorCode.VALIDATION_ERROR, "bad", context={"field": "animal_name"}
        )

        assert str(error) == "[VALIDATION_ERROR] bad"
        assert "context={'field': 'animal_name'}" in repr(error)
        assert "severity=MEDIUM" in repr(error)

    def test_cause_is_chained(self) -> None:
        """Verify the cause becomes __cause__."""
        cause = ConnectionError("refused")
        error = AnimalApiError(ErrorCode.STORE_ERROR, "failed", cause=cause)

        assert error.__cause__ is cause

    def test_fingerprint_is_stable_per_location(self) -> None:
        """Verify errors raised from the same place share a fingerprint."""
        fingerprints = {
            AnimalApiError(ErrorCode.INTERNAL_ERROR, f"msg {i}").fingerprint
            for i in range(3)
        }

        assert len(fingerprints) == 1
        assert len(fingerprints.pop()) == 16

    def test_stack_trace_is_captured(self) -> None:
        """Verify the creation stack is recorded."""
        error = AnimalApiError(ErrorCode.INTERNAL_ERROR, "boom")

        assert error.stack_trace
        frames = error.stack_trace
        assert any("test_stack_trace_is_captured" in frame for frame in frames)


@pytest.mark.unit
class TestSpecializedErrors:
    """Codes and severities of the concrete subclasses."""

    @pytest.mark.parametrize(
        ("error", "code", "severity"),
        [
            (ValidationError("bad"), ErrorCode.VALIDATION_ERROR, Severity.LOW),
            (NotFoundError("gone"), ErrorCode.NOT_FOUND, Severity.LOW),
            (
                AuthError(ErrorCode.MISSING_TOKEN, "no token"),
                ErrorCode.MISSING_TOKEN,
                Severity.HIGH,
            ),
            (
                OriginError("https://evil.example"),
                ErrorCode.ORIGIN_NOT_ALLOWED,
                Severity.HIGH,
            ),
            (StoreError("Delete failed"), ErrorCode.STORE_ERROR, Severity.HIGH),
        ],
    )
    def test_code_and_severity(
        self, error: AnimalApiError, code: ErrorCode, severity: Severity
    ) -> None:
        """Verify each subclass carries its fixed code and severity."""
        assert error.error_code == code.value
        assert error.severity is severity
        assert isinstance(error, AnimalApiError)

    def test_high_severity_is_not_expected(self) -> None:
        """Verify storage failures are treated as unexpected."""
        assert StoreError("Update failed").is_expected is False

    @pytest.mark.parametrize(
        "code",
        [
            ErrorCode.INVALID_CREDENTIALS,
            ErrorCode.MISSING_TOKEN,
            ErrorCode.MALFORMED_HEADER,
            ErrorCode.INVALID_TOKEN,
        ],
    )
    def test_auth_error_reason(self, code: ErrorCode) -> None:
        """Verify the rejection reason round-trips to the enum member."""
        assert AuthError(code, "rejected").reason is code

    def test_origin_error_context(self) -> None:
        """Verify the rejected origin is kept in the context."""
        error = OriginError("https://evil.example")

        assert error.message == "Not allowed by CORS"
        assert error.context == {"origin": "https://evil.example"}
