"""Unit tests for filmfolio.helpers.exceptions module.

Tests the error taxonomy and its machine-readable codes.
"""

import pytest

from filmfolio.helpers.exceptions import (
    ConflictError,
    FilmfolioError,
    InvalidCredentialsError,
    NotFoundError,
    StorageIOError,
    UnauthenticatedError,
    ValidationError,
)


class TestErrorCodes:
    """Each error class carries a stable code."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("error_class", "code"),
        [
            (NotFoundError, "not_found"),
            (ValidationError, "validation_error"),
            (UnauthenticatedError, "unauthenticated"),
            (InvalidCredentialsError, "invalid_credentials"),
            (ConflictError, "conflict"),
            (StorageIOError, "io_error"),
        ],
    )
    def test_code(self, error_class: type[FilmfolioError], code: str) -> None:
        assert error_class.code == code
        assert issubclass(error_class, FilmfolioError)

    @pytest.mark.unit
    def test_to_dict(self) -> None:
        """to_dict should expose code and message only."""
        error = ConflictError("album with this slug already exists")
        assert error.to_dict() == {"code": "conflict", "message": "album with this slug already exists"}

    @pytest.mark.unit
    def test_message_is_str(self) -> None:
        error = NotFoundError("album not found")
        assert str(error) == "album not found"
        assert error.message == "album not found"

    @pytest.mark.unit
    def test_can_be_caught_as_base(self) -> None:
        with pytest.raises(FilmfolioError):
            raise StorageIOError("failed to write document 'albums'")
