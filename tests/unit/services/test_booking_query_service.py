from datetime import date, datetime, timedelta, timezone

import pytest

from courtslot.core.config import Settings
from courtslot.core.enums import BookingViewType
from courtslot.core.exceptions import NotFoundException
from courtslot.models.booking import BookingStatus
from courtslot.schemas.booking import BookingListFilters
from courtslot.services.booking_cancellation_service import BookingCancellationService
from courtslot.services.booking_creation_service import BookingCreationService
from courtslot.services.booking_query_service import BookingQueryService

UTC = timezone.utc


@pytest.fixture
def book(db, facility, make_booking_data):
    """Create a booking from (start, slot_count) on a court for a player."""
    service = BookingCreationService(db)

    def _book(court, player, start: datetime, slot_count: int = 1, minutes: int = 30):
        windows = [
            (start + timedelta(minutes=minutes * i), start + timedelta(minutes=minutes * (i + 1)))
            for i in range(slot_count)
        ]
        return service.create_booking(facility.id, make_booking_data(court.id, player.id, windows))

    return _book


@pytest.mark.unit
class TestBookingsByCourt:
    def test_returns_bookings_with_slots_in_day(self, db, facility, court, player, book) -> None:
        in_day = book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        book(court, player, datetime(2024, 1, 16, 10, 0, tzinfo=UTC))

        result = BookingQueryService(db).get_bookings_by_court(
            facility.id, court.id, BookingViewType.DAY, date(2024, 1, 15)
        )

        assert [b.id for b in result] == [in_day.id]
        assert result[0].player.full_name == "Jane Doe"
        assert result[0].court.name == "Center Court"
        assert result[0].facility.id == facility.id

    def test_only_slots_inside_range_are_included(
        self, db, facility, court, player, book
    ) -> None:
        # Two slots straddling midnight; only the second starts on the 16th
        overnight = book(court, player, datetime(2024, 1, 15, 23, 30, tzinfo=UTC), slot_count=2)

        result = BookingQueryService(db).get_bookings_by_court(
            facility.id, court.id, BookingViewType.DAY, date(2024, 1, 16)
        )

        assert len(result) == 1
        assert [s.id for s in result[0].slots] == [overnight.slots[1].id]

    def test_other_courts_are_excluded(
        self, db, facility, court, second_court, player, book
    ) -> None:
        book(second_court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))

        result = BookingQueryService(db).get_bookings_by_court(
            facility.id, court.id, BookingViewType.WEEK, date(2024, 1, 15)
        )

        assert result == []

    def test_newest_booking_first(self, db, facility, court, player, second_player, book) -> None:
        older = book(court, player, datetime(2024, 1, 15, 8, 0, tzinfo=UTC))
        newer = book(court, second_player, datetime(2024, 1, 15, 18, 0, tzinfo=UTC))

        result = BookingQueryService(db).get_bookings_by_court(
            facility.id, court.id, BookingViewType.DAY, date(2024, 1, 15)
        )

        assert [b.id for b in result] == [newer.id, older.id]

    def test_court_of_other_facility_is_not_found(self, db, facility, foreign_court) -> None:
        with pytest.raises(NotFoundException):
            BookingQueryService(db).get_bookings_by_court(facility.id, foreign_court.id)


@pytest.mark.unit
class TestFacilityBookings:
    def test_search_matches_player_name_or_court_name(
        self, db, facility, court, second_court, player, second_player, book
    ) -> None:
        by_player = book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        by_court = book(second_court, second_player, datetime(2024, 1, 15, 11, 0, tzinfo=UTC))
        service = BookingQueryService(db)

        jane = service.list_facility_bookings(facility.id, BookingListFilters(search="jane"))
        clay = service.list_facility_bookings(facility.id, BookingListFilters(search="CLAY"))
        neither = service.list_facility_bookings(facility.id, BookingListFilters(search="zzz"))

        assert [b.id for b in jane.bookings] == [by_player.id]
        assert [b.id for b in clay.bookings] == [by_court.id]
        assert neither.total == 0
        assert neither.total_pages == 0

    def test_search_wildcards_are_literal(self, db, facility, court, player, book) -> None:
        book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))

        result = BookingQueryService(db).list_facility_bookings(
            facility.id, BookingListFilters(search="%")
        )

        assert result.total == 0

    def test_pagination(self, db, facility, court, player, book) -> None:
        created = [
            book(court, player, datetime(2024, 1, 15, 8 + i, 0, tzinfo=UTC)) for i in range(5)
        ]
        service = BookingQueryService(db)

        page_two = service.list_facility_bookings(facility.id, BookingListFilters(page=2, limit=2))

        assert page_two.total == 5
        assert page_two.total_pages == 3
        assert page_two.page == 2
        assert page_two.limit == 2
        assert [b.id for b in page_two.bookings] == [created[2].id, created[1].id]

    def test_omitted_limit_uses_configured_page_size(
        self, db, facility, court, player, book
    ) -> None:
        for i in range(4):
            book(court, player, datetime(2024, 1, 15, 8 + i, 0, tzinfo=UTC))
        config = Settings(_env_file=None, default_page_size=3)

        result = BookingQueryService(db, config=config).list_facility_bookings(
            facility.id, BookingListFilters()
        )

        assert result.limit == 3
        assert len(result.bookings) == 3
        assert result.total_pages == 2

    def test_filters_by_court_and_status(
        self, db, facility, court, second_court, player, owner, book
    ) -> None:
        kept = book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        cancelled = book(court, player, datetime(2024, 1, 15, 12, 0, tzinfo=UTC))
        book(second_court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        BookingCancellationService(db).cancel_slot(
            cancelled.slots[0].id, facility.id, "Rain", owner.id
        )
        service = BookingQueryService(db)

        confirmed = service.list_facility_bookings(
            facility.id,
            BookingListFilters(court_id=court.id, status=BookingStatus.CONFIRMED),
        )

        assert [b.id for b in confirmed.bookings] == [kept.id]

    def test_date_filters_bound_slot_start_times(
        self, db, facility, court, player, book
    ) -> None:
        book(court, player, datetime(2024, 1, 10, 10, 0, tzinfo=UTC))
        inside = book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        service = BookingQueryService(db)

        result = service.list_facility_bookings(
            facility.id,
            BookingListFilters(
                start_date=datetime(2024, 1, 12, tzinfo=UTC),
                end_date=datetime(2024, 1, 20, tzinfo=UTC),
            ),
        )
        open_ended = service.list_facility_bookings(
            facility.id, BookingListFilters(start_date=datetime(2024, 1, 12, tzinfo=UTC))
        )

        assert [b.id for b in result.bookings] == [inside.id]
        assert [b.id for b in open_ended.bookings] == [inside.id]

    def test_view_range_takes_precedence_over_dates(
        self, db, facility, court, player, book
    ) -> None:
        in_view = book(court, player, datetime(2024, 1, 17, 10, 0, tzinfo=UTC))
        book(court, player, datetime(2024, 3, 1, 10, 0, tzinfo=UTC))

        result = BookingQueryService(db).list_facility_bookings(
            facility.id,
            BookingListFilters(
                start_date=datetime(2024, 3, 1, tzinfo=UTC),
                end_date=datetime(2024, 3, 2, tzinfo=UTC),
            ),
            view_type=BookingViewType.WEEK,
            anchor=date(2024, 1, 15),
        )

        assert [b.id for b in result.bookings] == [in_view.id]

    def test_listed_bookings_carry_all_slots_in_order(
        self, db, facility, court, player, book
    ) -> None:
        booking = book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC), slot_count=3)

        result = BookingQueryService(db).list_facility_bookings(facility.id, BookingListFilters())

        slots = result.bookings[0].slots
        assert [s.id for s in slots] == [s.id for s in booking.slots]
        assert slots == sorted(slots, key=lambda s: s.start_time)

    def test_other_facilities_are_excluded(
        self, db, facility, other_facility, court, player, book
    ) -> None:
        book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))

        result = BookingQueryService(db).list_facility_bookings(
            other_facility.id, BookingListFilters()
        )

        assert result.total == 0
        assert result.bookings == []


@pytest.mark.unit
class TestPlayerBookings:
    def test_lists_only_the_players_bookings(
        self, db, facility, court, player, second_player, book
    ) -> None:
        mine = book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        book(court, second_player, datetime(2024, 1, 15, 11, 0, tzinfo=UTC))

        result = BookingQueryService(db).list_player_bookings(player.id, BookingListFilters())

        assert [b.id for b in result.bookings] == [mine.id]

    def test_get_booking_of_another_player_is_not_found(
        self, db, facility, court, player, second_player, book
    ) -> None:
        booking = book(court, player, datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        service = BookingQueryService(db)

        assert service.get_player_booking(player.id, booking.id).id == booking.id
        with pytest.raises(NotFoundException):
            service.get_player_booking(second_player.id, booking.id)
