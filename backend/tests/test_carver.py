from salon_availability.services.availability.carver import Interval, carve
from salon_availability.services.availability.snapshot import DayWindow, StaffSchedule


def _window(at, start="08:00", end="19:00"):
    return DayWindow(open=True, start=at(start), end=at(end))


def test_no_blocks_keeps_window(at):
    assert carve(_window(at), []) == [Interval(at("08:00"), at("19:00"))]


def test_block_in_middle_splits(at, block):
    result = carve(_window(at), [block(1, "12:00", "13:00")])

    assert result == [
        Interval(at("08:00"), at("12:00")),
        Interval(at("13:00"), at("19:00")),
    ]


def test_block_over_edges_trims(at, block):
    result = carve(_window(at), [block(1, "07:00", "09:00"), block(1, "18:30", "20:00")])

    assert result == [Interval(at("09:00"), at("18:30"))]


def test_blocks_order_does_not_matter(at, block):
    blocks = [block(1, "10:00", "11:00"), block(1, "15:00", "16:00"), block(1, "10:30", "12:00")]

    assert carve(_window(at), blocks) == carve(_window(at), list(reversed(blocks)))
    assert carve(_window(at), blocks) == [
        Interval(at("08:00"), at("10:00")),
        Interval(at("12:00"), at("15:00")),
        Interval(at("16:00"), at("19:00")),
    ]


def test_blocks_covering_everything(at, block):
    assert carve(_window(at), [block(1, "08:00", "13:00"), block(1, "13:00", "19:00")]) == []


def test_all_day_empties(at, all_day):
    assert carve(_window(at), [all_day(1)]) == []
    assert carve(_window(at), [all_day(1, type="sick")]) == []


def test_incomplete_block_ignored(at):
    partial = StaffSchedule(staff_id=1, date="2026-03-02", start_time=at("10:00"), end_time=None)
    inverted = StaffSchedule(staff_id=1, date="2026-03-02", start_time=at("11:00"), end_time=at("10:00"))

    assert carve(_window(at), [partial, inverted]) == [Interval(at("08:00"), at("19:00"))]


def test_closed_window():
    assert carve(DayWindow.closed("salon_closed"), []) == []
