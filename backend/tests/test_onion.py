from salon_availability.services.availability.config import OnionParams
from salon_availability.services.availability.constraints import DayConstraints
from salon_availability.services.availability.dense import generate_dense_slots
from salon_availability.services.availability.onion import generate_onion_slots


def _constraints(snapshot, config, now, staff_id=1):
    return DayConstraints.build(snapshot, staff_id, config, now)


def test_edge_bias_against_dense(make_snapshot, config, now, at):
    constraints = _constraints(make_snapshot(interval=60), config, now)

    dense = generate_dense_slots(constraints, 60)
    onion = generate_onion_slots(constraints, 60, OnionParams(slot_size=60, layer=2))
    front_only = generate_onion_slots(
        constraints, 60, OnionParams(slot_size=60, layer=2, disable_back_slots=True),
    )

    assert len(dense) == 11
    assert [s.start for s in onion] == [at("08:00"), at("09:00"), at("17:00"), at("18:00")]
    assert [s.start for s in front_only] == [at("08:00"), at("09:00")]
    assert not any(s.has_overlap for s in onion)


def test_front_wins_on_conflict(make_snapshot, config, now, at):
    constraints = _constraints(make_snapshot(hours=("08:00", "11:00")), config, now)

    slots = generate_onion_slots(constraints, 90, OnionParams(slot_size=60, layer=2))

    # back candidates 09:30-11:00 and 08:30-10:00 overlap the front ones
    assert [(s.start, s.end) for s in slots] == [
        (at("08:00"), at("09:30")),
        (at("09:00"), at("10:30")),
    ]


def test_identical_front_and_back_not_duplicated(make_snapshot, config, now, at):
    constraints = _constraints(make_snapshot(hours=("08:00", "10:00")), config, now)

    slots = generate_onion_slots(constraints, 60, OnionParams(slot_size=60, layer=2))

    assert [s.start for s in slots] == [at("08:00"), at("09:00")]


def test_allow_overlap_past_closing(make_snapshot, config, now, at):
    constraints = _constraints(make_snapshot(hours=("17:00", "19:00")), config, now)

    strict = generate_onion_slots(
        constraints, 90, OnionParams(slot_size=60, layer=2, disable_back_slots=True),
    )
    relaxed = generate_onion_slots(
        constraints, 90, OnionParams(slot_size=60, layer=2, disable_back_slots=True, allow_overlap=30),
    )

    assert [s.start for s in strict] == [at("17:00")]
    assert [(s.start, s.end, s.has_overlap) for s in relaxed] == [
        (at("17:00"), at("18:30"), False),
        (at("18:00"), at("19:30"), True),
    ]


def test_back_slots_never_overlap_closing(make_snapshot, config, now, at):
    constraints = _constraints(make_snapshot(hours=("17:00", "19:00")), config, now)

    slots = generate_onion_slots(constraints, 90, OnionParams(slot_size=60, layer=2, allow_overlap=30))

    assert all(s.end <= at("19:00") or s.has_overlap for s in slots)
    assert [(s.start, s.has_overlap) for s in slots] == [
        (at("17:00"), False),
        (at("18:00"), True),
    ]


def test_occupied_anchor_dropped(make_snapshot, booking, config, now, at):
    snapshot = make_snapshot(reservations=[booking(1, "08:00", "09:00")])

    slots = generate_onion_slots(_constraints(snapshot, config, now), 60, OnionParams(slot_size=60, layer=2))

    assert [s.start for s in slots] == [at("09:00"), at("17:00"), at("18:00")]


def test_staff_block_respected(make_snapshot, block, config, now, at):
    snapshot = make_snapshot(schedules=[block(1, "17:30", "18:00")])

    slots = generate_onion_slots(_constraints(snapshot, config, now), 60, OnionParams(slot_size=60, layer=2))

    assert [s.start for s in slots] == [at("08:00"), at("09:00"), at("18:00")]


def test_zero_layer(make_snapshot, config, now):
    constraints = _constraints(make_snapshot(), config, now)

    assert generate_onion_slots(constraints, 60, OnionParams(layer=0)) == []
