import pytest

from courtslot.core.exceptions import (
    BookingConflictException,
    ConflictException,
    DomainException,
    NotFoundException,
    ServiceException,
    ValidationException,
)


@pytest.mark.unit
class TestDomainExceptions:
    @pytest.mark.parametrize(
        "exc_class, status_code",
        [
            (ValidationException, 400),
            (NotFoundException, 404),
            (ConflictException, 409),
            (ServiceException, 500),
            (DomainException, 500),
        ],
    )
    def test_http_status_mapping(self, exc_class, status_code) -> None:
        http_exc = exc_class("message").to_http_exception()

        assert http_exc.status_code == status_code
        assert http_exc.detail["message"] == "message"

    def test_code_defaults_to_class_name(self) -> None:
        exc = NotFoundException("Player not found", details={"player_id": "p1"})

        assert exc.code == "NotFoundException"
        assert exc.to_http_exception().detail == {
            "message": "Player not found",
            "code": "NotFoundException",
            "details": {"player_id": "p1"},
        }

    def test_booking_conflict_defaults(self) -> None:
        exc = BookingConflictException()

        assert isinstance(exc, ConflictException)
        assert exc.code == "BOOKING_CONFLICT"
        assert exc.to_http_exception().status_code == 409
        assert "conflicts" in exc.message

    def test_service_exception_has_fallback_message(self) -> None:
        exc = ServiceException()

        assert exc.message == "An error occurred processing your request"
        assert exc.to_http_exception().status_code == 500
