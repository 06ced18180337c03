"""
Unit tests for default seat layout generation.
"""

from event_booking.services.seat_service import _row_label, generate_default_layout


def test_rows_of_ten():
    layout = generate_default_layout(25)
    numbers = [seat.seat_number for seat in layout]
    assert len(numbers) == 25
    assert numbers[:10] == [f"A{n}" for n in range(1, 11)]
    assert numbers[10] == "B1"
    assert numbers[-1] == "C5"


def test_exact_multiple_fills_last_row():
    layout = generate_default_layout(20)
    assert [seat.seat_number for seat in layout][-1] == "B10"


def test_generated_seats_are_regular():
    layout = generate_default_layout(3)
    assert {(seat.seat_type, seat.price_multiplier) for seat in layout} == {("regular", 1.0)}


def test_row_labels_past_z():
    assert _row_label(0) == "A"
    assert _row_label(25) == "Z"
    assert _row_label(26) == "AA"
    assert _row_label(27) == "AB"
