"""Checkout: sealing a session into history with its financial snapshot."""

from dataclasses import replace

import pytest

from domain.errors import PersistenceError
from domain.room import RoomStatus
from domain.session import PaymentMethod
from infrastructure import codec

from conftest import HOUR, MINUTE, T0


def _occupy(pos, **kwargs):
    pos.sessions.start_session("R101", 4, **kwargs)
    return pos.registry.get("R101")


def test_end_to_end_minimum_charge_night(pos):
    _occupy(pos)
    pos.sessions.add_order("R101", "M001", 2)

    sealed = pos.checkout.checkout("R101", PaymentMethod.CASH, 30000)

    assert sealed.end_time == T0
    assert sealed.room_charges == 16000
    assert sealed.order_charges == 6000
    assert sealed.discount == 0
    assert sealed.tax == pytest.approx(1100)
    assert sealed.service_charge == pytest.approx(2200)
    assert sealed.total_bill == pytest.approx(25300)
    assert sealed.paid_amount == 30000
    assert sealed.change_amount == pytest.approx(4700)
    assert sealed.payment_method is PaymentMethod.CASH


def test_snapshot_matches_bill_at_checkout_instant(pos):
    _occupy(pos, member_card="M123")
    pos.sessions.add_order("R101", "M003", 3)
    pos.clock.advance(hours=2, minutes=40)
    expected = pos.billing.live_bill("R101")

    sealed = pos.checkout.checkout("R101", PaymentMethod.CARD)

    assert expected.billable_hours == 3
    assert sealed.total_bill == expected.total_amount
    assert sealed.room_charges == expected.room_charges
    assert sealed.order_charges == expected.order_total
    assert sealed.discount == expected.discount
    assert sealed.tax == expected.tax
    assert sealed.service_charge == expected.service_charge


def test_room_moves_to_cleaning_and_drops_session(pos):
    _occupy(pos)
    pos.checkout.checkout("R101", PaymentMethod.CASH)

    room = pos.registry.get("R101")
    assert room.status is RoomStatus.CLEANING
    assert room.session is None
    stored = codec.room_from_dict(pos.store.get("room:R101"))
    assert stored == room


def test_history_record_is_written(pos):
    _occupy(pos)
    sealed = pos.checkout.checkout("R101", PaymentMethod.KBZ_PAY)
    assert pos.checkout.list_history() == [sealed]
    assert pos.checkout.get_history(sealed.session_id) == sealed
    assert pos.store.get(f"session-history:{sealed.session_id}")["payment_method"] == "KBZ Pay"


def test_exact_payment_when_amount_not_given(pos):
    _occupy(pos)
    pos.clock.advance(hours=3)
    sealed = pos.checkout.checkout("R101", PaymentMethod.WAVE_MONEY, None)
    assert sealed.paid_amount == sealed.total_bill
    assert sealed.change_amount == 0


def test_zero_tender_is_a_real_zero_payment(pos):
    _occupy(pos)
    sealed = pos.checkout.checkout("R101", PaymentMethod.CASH, 0)
    assert sealed.paid_amount == 0
    assert sealed.change_amount == pytest.approx(-sealed.total_bill)


def test_under_tender_leaves_negative_change(pos):
    _occupy(pos)
    sealed = pos.checkout.checkout("R101", PaymentMethod.CASH, 10000)
    assert sealed.change_amount < 0


def test_quick_end_pays_exact_cash(pos):
    _occupy(pos)
    sealed = pos.checkout.quick_end("R101")
    assert sealed.payment_method is PaymentMethod.CASH
    assert sealed.change_amount == 0


def test_second_checkout_is_noop(pos):
    _occupy(pos)
    assert pos.checkout.checkout("R101", PaymentMethod.CASH) is not None
    assert pos.checkout.checkout("R101", PaymentMethod.CASH) is None
    assert len(pos.checkout.list_history()) == 1


def test_checkout_without_session_or_room(pos):
    assert pos.checkout.checkout("R101", PaymentMethod.CASH) is None
    assert pos.checkout.checkout("NOPE", PaymentMethod.CASH) is None


def test_paused_session_is_billed_up_to_pause(pos):
    _occupy(pos)
    pos.clock.advance(hours=3, minutes=10)
    pos.sessions.pause_session("R101")
    pos.clock.advance(hours=5)
    sealed = pos.checkout.checkout("R101", PaymentMethod.CASH)
    assert sealed.room_charges == 3.5 * 8000
    assert sealed.is_paused is True
    assert sealed.end_time == T0 + 8 * HOUR + 10 * MINUTE


def test_room_rate_edit_after_start_keeps_minimum_snapshot(pos):
    _occupy(pos)
    room = pos.registry.get("R101")
    pos.catalog.save_room(replace(room, minimum_hours=4, status=RoomStatus.AVAILABLE, session=None))
    assert pos.registry.get("R101").session is not None

    sealed = pos.checkout.checkout("R101", PaymentMethod.CASH)
    assert sealed.minimum_hours == 2
    assert sealed.room_charges == 16000


def test_sealed_session_cannot_be_sealed_again(pos):
    bill = pos.billing.bill_for(_occupy(pos))
    sealed = pos.checkout.checkout("R101", PaymentMethod.CASH)
    assert pos.billing.bill_for(pos.registry.get("R101")) is None
    with pytest.raises(ValueError):
        sealed.seal(T0, bill, PaymentMethod.CASH, 0)


class TestHistoryDurability:
    def test_transient_history_failure_is_retried(self, pos):
        _occupy(pos)
        pos.store.fail_writes("session-history:", times=2)
        sealed = pos.checkout.checkout("R101", PaymentMethod.CASH)
        assert pos.store.write_attempts[f"session-history:{sealed.session_id}"] == 3
        assert pos.checkout.list_history() == [sealed]
        assert pos.registry.get("R101").status is RoomStatus.CLEANING

    def test_persistent_history_failure_keeps_room_occupied(self, pos):
        room = _occupy(pos)
        pos.store.fail_writes("session-history:")
        with pytest.raises(PersistenceError):
            pos.checkout.checkout("R101", PaymentMethod.CASH)

        still = pos.registry.get("R101")
        assert still.status is RoomStatus.OCCUPIED
        assert still.session == room.session
        assert pos.store.list("session-history:") == []

        pos.store.failures.clear()
        sealed = pos.checkout.checkout("R101", PaymentMethod.CASH)
        assert sealed.session_id == room.session.session_id
        assert pos.registry.get("R101").status is RoomStatus.CLEANING

    def test_room_write_failure_after_archiving_still_returns_receipt(self, pos):
        _occupy(pos)
        pos.store.fail_writes("room:", times=1)

        sealed = pos.checkout.checkout("R101", PaymentMethod.CASH, 30000)

        assert sealed.change_amount == pytest.approx(4700)
        assert pos.checkout.list_history() == [sealed]
        assert pos.registry.get("R101").status is RoomStatus.CLEANING
        assert codec.room_from_dict(pos.store.get("room:R101")).status is RoomStatus.OCCUPIED

        room = pos.sessions.update_room_status("R101", RoomStatus.AVAILABLE)
        assert codec.room_from_dict(pos.store.get("room:R101")) == room
