from datetime import date, datetime, timedelta

import pytest

from models import ProgressRecord, TrendCategory, WeightEntry
from protocol.views import (
    MILESTONE_RULES, build_journey, interpret_weight_trend, milestones, recent_weights, weight_lost,
)


def make_record(**overrides) -> ProgressRecord:
    fields = {"start_date": date(2026, 3, 1)}
    fields.update(overrides)
    return ProgressRecord(**fields)


def history(*weights, start=date(2026, 3, 1)):
    return [WeightEntry(date=start + timedelta(days=i), weight=w) for i, w in enumerate(weights)]


def achieved_ids(items):
    return [m.id for m in items if m.achieved]


def test_weight_lost_never_negative():
    assert weight_lost(70, 75) == 0
    assert weight_lost(80, 75) == 5
    assert weight_lost(None, 75) == 0
    assert weight_lost(80, None) == 0


def test_milestone_order_is_fixed():
    ids = [m.id for m in milestones(make_record(), 1, 0)]
    assert ids == [rule.id for rule in MILESTONE_RULES]
    assert ids[0] == "protocol_activated"
    assert ids[-3:] == ["first_kg", "three_kg", "five_kg"]


def test_fresh_record_only_activated():
    assert achieved_ids(milestones(make_record(), 1, 0)) == ["protocol_activated"]


def test_first_ritual_counts_any_check_in():
    record = make_record(streak=0, last_check_in=date(2026, 3, 2))
    assert "first_ritual" in achieved_ids(milestones(record, 5, 0))


def test_first_week_needs_days_and_streak():
    assert "first_week" not in achieved_ids(milestones(make_record(streak=5), 6, 0))
    assert "first_week" not in achieved_ids(milestones(make_record(streak=4), 7, 0))
    assert "first_week" in achieved_ids(milestones(make_record(streak=5), 7, 0))


def test_streak_day_and_weight_milestones():
    record = make_record(streak=14, last_check_in=date(2026, 3, 22))
    ids = achieved_ids(milestones(record, 22, 3.2))
    assert ids == [
        "protocol_activated", "first_ritual", "three_day_streak", "first_week",
        "acceleration_phase", "two_weeks", "metabolism_stabilized", "first_kg", "three_kg",
    ]


def test_milestone_thresholds_exposed():
    by_id = {m.id: m for m in milestones(make_record(), 1, 0)}
    assert by_id["first_week"].day_required == 7
    assert by_id["first_week"].streak_required == 5
    assert by_id["five_kg"].weight_required == 5


def test_interpretation_recent_rise_overrides_magnitude():
    result = interpret_weight_trend(4, 20, history(80.0, 80.4, 81.0))
    assert result.category == TrendCategory.ENCOURAGING


def test_interpretation_small_rise_is_ignored():
    result = interpret_weight_trend(4, 20, history(80.0, 80.6, 80.5))
    assert result.category == TrendCategory.POSITIVE


def test_interpretation_only_looks_at_last_three_entries():
    result = interpret_weight_trend(3, 20, history(75.0, 82.0, 81.0, 80.0))
    assert result.category == TrendCategory.POSITIVE


def test_interpretation_needs_three_entries_for_trend():
    result = interpret_weight_trend(1, 20, history(80.0, 82.0))
    assert result.category == TrendCategory.POSITIVE


@pytest.mark.parametrize(
    "lost, days, category, title",
    [
        (0, 2, TrendCategory.NEUTRAL, "内部调整中"),
        (0, 3, TrendCategory.NEUTRAL, "内部调整中"),
        (0, 4, TrendCategory.ENCOURAGING, "内部过程进行中"),
        (0.5, 10, TrendCategory.POSITIVE, "初步进展"),
        (2, 10, TrendCategory.POSITIVE, "加速确认"),
        (4.9, 10, TrendCategory.POSITIVE, "加速确认"),
        (5, 10, TrendCategory.POSITIVE, "蜕变进行中"),
    ],
)
def test_interpretation_decision_tree(lost, days, category, title):
    result = interpret_weight_trend(lost, days, [])
    assert result.category == category
    assert result.title == title


def test_interpretation_message_formats_weight():
    result = interpret_weight_trend(2.25, 10, [])
    assert "2.2" in result.message or "2.3" in result.message


def test_recent_weights_keeps_latest():
    entries = history(*[80 - i * 0.1 for i in range(20)])
    recent = recent_weights(entries)
    assert len(recent) == 14
    assert recent[-1] == entries[-1]
    assert recent_weights(entries[:3]) == entries[:3]


def test_build_journey():
    record = make_record(
        streak=9,
        last_check_in=date(2026, 3, 10),
        initial_weight=82.0,
        current_weight=80.5,
        weight_history=history(82.0, 81.0, 80.5),
    )
    journey = build_journey(record, datetime(2026, 3, 10, 20, 0))

    assert journey.days_elapsed == 10
    assert journey.weight_lost == pytest.approx(1.5)
    assert journey.checked_in_today
    assert journey.current_phase.phase.id == "acceleration"
    assert journey.current_phase.index == 1
    assert journey.interpretation.category == TrendCategory.POSITIVE
    assert journey.achieved_count == len(achieved_ids(journey.milestones))
    assert "first_kg" in achieved_ids(journey.milestones)
    assert journey.status_message.endswith("✓")
