"""Tests for the booking and customer admin workspaces."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
import pytest_asyncio

from yachtme.admin import (
    ActionFailedError,
    BookingAdmin,
    BookingDraft,
    CustomerAdmin,
    CustomerDraft,
    DayStatus,
    DraftValidationError,
    RecordNotFoundError,
    TransitionNotAllowedError,
)
from yachtme.models.booking import BookingStatus
from yachtme.storage.base import BookingConflictError


@pytest_asyncio.fixture
async def bookings(seeded_gateway):
    admin = BookingAdmin(seeded_gateway)
    await admin.load()
    return admin


def _by_name(admin, name):
    return next(b for b in admin.bookings if b.customer_name == name)


@pytest.mark.unit
class TestBookingDraft:
    def test_missing_fields_rejected(self):
        with pytest.raises(DraftValidationError) as exc:
            BookingDraft(customer_name="Mario").to_fields()
        assert exc.value.message == "Compila tutti i campi obbligatori"

    def test_inverted_range_rejected(self):
        draft = BookingDraft(
            boat_id=uuid4(),
            customer_name="Mario",
            customer_email="m@example.com",
            start_date=date(2025, 7, 5),
            end_date=date(2025, 7, 4),
        )
        with pytest.raises(DraftValidationError):
            draft.to_fields()

    def test_blank_optionals_become_none(self):
        fields = BookingDraft(
            boat_id=uuid4(),
            customer_name=" Mario ",
            customer_email="m@example.com",
            start_date=date(2025, 7, 5),
            end_date=date(2025, 7, 5),
            total_price=0,
        ).to_fields()
        assert fields.customer_name == "Mario"
        assert fields.customer_phone is None
        assert fields.notes is None
        assert fields.total_price == 0


@pytest.mark.unit
class TestBookingAdmin:
    @pytest.mark.asyncio
    async def test_load_joins_boats(self, bookings):
        assert len(bookings.bookings) == 2
        assert len(bookings.boats) == 2
        assert _by_name(bookings, "Mario Rossi").boat_name == "Azimut 68"

    @pytest.mark.asyncio
    async def test_filter_search_and_status(self, bookings):
        assert [b.customer_name for b in bookings.filter("joker")] == ["Anna Bianchi"]
        assert [b.customer_name for b in bookings.filter("", "confirmed")] == ["Mario Rossi"]
        assert bookings.filter("MARIO", "pending") == []
        assert len(bookings.filter()) == 2

    @pytest.mark.asyncio
    async def test_calendar(self, bookings):
        grid = bookings.calendar(2025, 7)
        by_day = {d.day.day: d for d in grid.days}
        assert by_day[10].status == DayStatus.CONFIRMED
        assert by_day[11].status == DayStatus.MIXED
        assert by_day[13].status == DayStatus.FREE

    @pytest.mark.asyncio
    async def test_create_refreshes_working_set(self, bookings):
        result = await bookings.save(
            BookingDraft(
                boat_id=bookings.boats[0].id,
                customer_name="Luca",
                customer_email="luca@example.com",
                start_date=date(2025, 8, 1),
                end_date=date(2025, 8, 2),
            )
        )
        assert result.message == "Prenotazione creata"
        assert result.record.status == BookingStatus.PENDING
        assert len(bookings.bookings) == 3

    @pytest.mark.asyncio
    async def test_update_existing(self, bookings):
        draft = BookingDraft.from_booking(_by_name(bookings, "Anna Bianchi"))
        draft.notes = "Arrivo alle 9"
        result = await bookings.save(draft)
        assert result.message == "Prenotazione aggiornata"
        assert _by_name(bookings, "Anna Bianchi").notes == "Arrivo alle 9"

    @pytest.mark.asyncio
    async def test_confirmed_conflict_propagates(self, bookings):
        mario = _by_name(bookings, "Mario Rossi")
        draft = BookingDraft(
            boat_id=mario.boat_id,
            customer_name="Luca",
            customer_email="luca@example.com",
            start_date=date(2025, 7, 12),
            end_date=date(2025, 7, 13),
            status=BookingStatus.CONFIRMED,
        )
        with pytest.raises(BookingConflictError):
            await bookings.save(draft)

    @pytest.mark.asyncio
    async def test_confirm_pending(self, bookings):
        anna = _by_name(bookings, "Anna Bianchi")
        result = await bookings.change_status(anna.id, BookingStatus.CONFIRMED)
        assert result.message == "Prenotazione confermata"
        assert _by_name(bookings, "Anna Bianchi").status == BookingStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_confirmed_cannot_change(self, bookings):
        mario = _by_name(bookings, "Mario Rossi")
        with pytest.raises(TransitionNotAllowedError):
            await bookings.change_status(mario.id, BookingStatus.CANCELLED)

    @pytest.mark.asyncio
    async def test_unknown_booking(self, bookings):
        with pytest.raises(RecordNotFoundError):
            await bookings.change_status(uuid4(), BookingStatus.CONFIRMED)

    @pytest.mark.asyncio
    async def test_delete(self, bookings):
        anna = _by_name(bookings, "Anna Bianchi")
        result = await bookings.delete(anna.id)
        assert result.message == "Prenotazione eliminata"
        assert len(bookings.bookings) == 1

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_state(self, bookings, seeded_gateway):
        seeded_gateway.fail_on = {"delete_booking"}
        anna = _by_name(bookings, "Anna Bianchi")
        with pytest.raises(ActionFailedError) as exc:
            await bookings.delete(anna.id)
        assert exc.value.message == "Errore nell'eliminazione"
        assert len(bookings.bookings) == 2

    @pytest.mark.asyncio
    async def test_failed_load(self, seeded_gateway):
        seeded_gateway.fail_on = {"list_bookings"}
        with pytest.raises(ActionFailedError):
            await BookingAdmin(seeded_gateway).load()


@pytest.mark.unit
class TestCustomerAdmin:
    @pytest_asyncio.fixture
    async def customers(self, seeded_gateway):
        seeded_gateway.add_customer(
            name="Mario Rossi", email="mario@example.com", phone="3331234567", tags=["VIP"]
        )
        seeded_gateway.add_customer(name="Giulia Verdi", email="giulia@example.com")
        admin = CustomerAdmin(seeded_gateway)
        await admin.load()
        return admin

    @pytest.mark.asyncio
    async def test_filter(self, customers):
        assert [c.name for c in customers.filter("GIULIA")] == ["Giulia Verdi"]
        assert [c.name for c in customers.filter("1234")] == ["Mario Rossi"]
        assert [c.name for c in customers.filter("", "VIP")] == ["Mario Rossi"]
        assert customers.filter("giulia", "VIP") == []

    @pytest.mark.asyncio
    async def test_detail_includes_bookings_by_email(self, customers):
        mario = customers.filter("mario")[0]
        detail = await customers.detail(mario.id)
        assert [b.customer_name for b in detail.recent_bookings] == ["Mario Rossi"]

    @pytest.mark.asyncio
    async def test_detail_survives_bookings_failure(self, customers, seeded_gateway):
        seeded_gateway.fail_on = {"list_bookings_by_email"}
        mario = customers.filter("mario")[0]
        detail = await customers.detail(mario.id)
        assert detail.customer.name == "Mario Rossi"
        assert detail.recent_bookings == []

    @pytest.mark.asyncio
    async def test_detail_unknown(self, customers):
        with pytest.raises(RecordNotFoundError):
            await customers.detail(uuid4())

    @pytest.mark.asyncio
    async def test_save_requires_name_and_email(self, customers, seeded_gateway):
        seeded_gateway.calls.clear()
        with pytest.raises(DraftValidationError):
            await customers.save(CustomerDraft(name="Solo nome"))
        assert seeded_gateway.calls == []

    @pytest.mark.asyncio
    async def test_create_puts_customer_first(self, customers):
        result = await customers.save(CustomerDraft(name="Luca", email="luca@example.com"))
        assert result.message == "Cliente creato"
        assert customers.customers[0].name == "Luca"

    @pytest.mark.asyncio
    async def test_toggle_and_set_tags(self, customers):
        giulia = customers.filter("giulia")[0]
        draft = CustomerDraft.from_customer(giulia)
        draft.toggle_tag("Fedele")
        draft.toggle_tag("VIP")
        draft.toggle_tag("Fedele")
        assert draft.tags == ["VIP"]

        await customers.set_tags(giulia.id, draft.tags)
        assert {c.name for c in customers.filter("", "VIP")} == {"Giulia Verdi", "Mario Rossi"}

    @pytest.mark.asyncio
    async def test_delete(self, customers):
        giulia = customers.filter("giulia")[0]
        await customers.delete(giulia.id)
        assert customers.filter("giulia") == []
