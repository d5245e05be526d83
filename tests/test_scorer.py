"""Tests for src.analyzer.scorer — scoring rules, ranking and critical window."""

from __future__ import annotations

import pytest

from src.analyzer.config import DEFAULT_CONFIG, BottleneckConfig, Weights
from src.analyzer.scorer import (
    PROCESS_RULES,
    QUEUE_RULES,
    Candidate,
    coefficient_of_variation,
    detect_bottleneck,
    process_high_utilization,
    process_mostly_at_capacity,
    process_plateaued,
    queue_high_average,
    queue_long_growth,
    queue_mostly_high,
    queue_persistent,
    rank_candidates,
    score,
    time_window,
)
from src.contracts.enums import BottleneckType
from src.contracts.verdict import TimeWindow
from tests.conftest import make_process, make_queue

# alternating output: second-half CV well above 0.15
NOISY = [10, 0, 10, 0, 10, 0, 10, 0, 10, 0]
FLAT = [5] * 10

# ═══════════════════════════════════════════════════════════════════════════
#  Queue rules
# ═══════════════════════════════════════════════════════════════════════════


class TestQueueRules:
    def test_high_average(self):
        assert queue_high_average(make_queue(max_level=40, average_level=25), DEFAULT_CONFIG)
        assert queue_high_average(make_queue(max_level=40, average_level=20), DEFAULT_CONFIG)
        assert not queue_high_average(make_queue(max_level=40, average_level=19), DEFAULT_CONFIG)

    def test_high_average_zero_max(self):
        assert not queue_high_average(make_queue(max_level=0, average_level=0), DEFAULT_CONFIG)

    def test_long_growth(self):
        assert queue_long_growth(make_queue(growth_streak=20), DEFAULT_CONFIG)
        assert not queue_long_growth(make_queue(growth_streak=19), DEFAULT_CONFIG)

    def test_mostly_high(self):
        assert queue_mostly_high(make_queue(days_above_threshold=5, total_days=10), DEFAULT_CONFIG)
        assert not queue_mostly_high(make_queue(days_above_threshold=4, total_days=10), DEFAULT_CONFIG)

    def test_mostly_high_no_days(self):
        assert not queue_mostly_high(make_queue(days_above_threshold=0, total_days=0), DEFAULT_CONFIG)

    def test_persistent(self):
        assert queue_persistent(make_queue(values=[1, 1, 1, 1, 10, 10, 10, 10]), DEFAULT_CONFIG)

    def test_persistent_needs_twenty_percent(self):
        assert not queue_persistent(make_queue(values=[10] * 4 + [12] * 4), DEFAULT_CONFIG)
        assert queue_persistent(make_queue(values=[10] * 4 + [12.5] * 4), DEFAULT_CONFIG)

    def test_persistent_odd_length_split(self):
        # halves [2, 2] and [2, 10, 10]
        assert queue_persistent(make_queue(values=[2, 2, 2, 10, 10]), DEFAULT_CONFIG)

    def test_persistent_empty_half(self):
        assert not queue_persistent(make_queue(values=[None, None, 5, 5]), DEFAULT_CONFIG)
        assert not queue_persistent(make_queue(values=[]), DEFAULT_CONFIG)


# ═══════════════════════════════════════════════════════════════════════════
#  Process rules
# ═══════════════════════════════════════════════════════════════════════════


class TestProcessRules:
    def test_high_utilization(self):
        assert process_high_utilization(make_process(utilization_rate=0.9), DEFAULT_CONFIG)
        assert not process_high_utilization(make_process(utilization_rate=0.89), DEFAULT_CONFIG)
        assert not process_high_utilization(make_process(utilization_rate=None), DEFAULT_CONFIG)

    def test_mostly_at_capacity(self):
        p = make_process(utilization_rate=0.95, days_at_capacity=6, total_days=10)
        assert process_mostly_at_capacity(p, DEFAULT_CONFIG)
        p = make_process(utilization_rate=0.95, days_at_capacity=4, total_days=10)
        assert not process_mostly_at_capacity(p, DEFAULT_CONFIG)

    def test_capacity_requires_utilization(self):
        p = make_process(utilization_rate=None, days_at_capacity=10, total_days=10)
        assert not process_mostly_at_capacity(p, DEFAULT_CONFIG)

    def test_capacity_zero_days(self):
        p = make_process(utilization_rate=0.99, days_at_capacity=0, total_days=0)
        assert not process_mostly_at_capacity(p, DEFAULT_CONFIG)

    def test_coefficient_of_variation(self):
        assert coefficient_of_variation([5, 5, 5]) == 0
        assert coefficient_of_variation([0, 10]) == pytest.approx(1.0)
        assert coefficient_of_variation([]) is None
        assert coefficient_of_variation([0, 0]) is None

    def test_plateau(self):
        assert process_plateaued(make_process(values=FLAT), DEFAULT_CONFIG)
        assert not process_plateaued(make_process(values=NOISY), DEFAULT_CONFIG)

    def test_plateau_uses_second_half_only(self):
        values = [0, 50, 3, 80, 10, 10, 10, 10, 10, 10]
        assert process_plateaued(make_process(values=values), DEFAULT_CONFIG)

    def test_plateau_zero_mean(self):
        assert not process_plateaued(make_process(values=[0] * 6), DEFAULT_CONFIG)

    def test_plateau_without_utilization(self):
        p = make_process(values=FLAT, utilization_rate=None)
        assert score(p, PROCESS_RULES)[0] == pytest.approx(0.2)


# ═══════════════════════════════════════════════════════════════════════════
#  score
# ═══════════════════════════════════════════════════════════════════════════


class TestScore:
    def test_queue_average_only(self):
        # series rises early then stays flat: only the average rule holds
        q = make_queue(
            values=[10, 20, 30, 40] + [15] * 46,
            max_level=40,
            average_level=25,
            growth_streak=3,
            days_above_threshold=1,
            total_days=50,
        )
        confidence, matched = score(q, QUEUE_RULES)
        assert confidence == pytest.approx(0.3)
        assert matched == ("avg_level",)

    def test_queue_all_rules(self):
        q = make_queue(
            values=[1] * 10 + [10] * 10,
            max_level=10,
            average_level=9,
            growth_streak=25,
            days_above_threshold=18,
            total_days=20,
        )
        confidence, matched = score(q, QUEUE_RULES)
        assert confidence == pytest.approx(1.0)
        assert matched == ("avg_level", "growth_streak", "days_above", "persistence")

    def test_process_without_plateau(self):
        p = make_process(values=NOISY, utilization_rate=0.95, days_at_capacity=6, total_days=10)
        confidence, matched = score(p, PROCESS_RULES)
        assert confidence == pytest.approx(0.6)
        assert matched == ("utilization", "capacity_days")

    def test_process_cap(self):
        p = make_process(values=FLAT, utilization_rate=0.99, days_at_capacity=10)
        assert score(p, PROCESS_RULES)[0] == pytest.approx(0.8)

    def test_clipped_to_one(self):
        cfg = BottleneckConfig(scoring=Weights(queue_avg_level_weight=0.9, queue_days_above_weight=0.9))
        q = make_queue(max_level=10, average_level=9, days_above_threshold=5, total_days=5)
        assert score(q, QUEUE_RULES, cfg)[0] == 1.0

    def test_nothing_matches(self):
        assert score(make_queue(max_level=10, average_level=1), QUEUE_RULES) == (0.0, ())


# ═══════════════════════════════════════════════════════════════════════════
#  Ranking and window
# ═══════════════════════════════════════════════════════════════════════════


class TestRanking:
    def test_stable_on_ties(self):
        a = Candidate(make_queue(id="a_level"), BottleneckType.QUEUE, 0.5)
        b = Candidate(make_queue(id="b_level"), BottleneckType.QUEUE, 0.5)
        c = Candidate(make_process(id="c"), BottleneckType.PROCESS, 0.8)
        assert [x.feature.id for x in rank_candidates([a, b, c])] == ["c", "a_level", "b_level"]


class TestTimeWindow:
    def test_queue_window_around_peak(self):
        q = make_queue(values=[5, 5, 33, 34, 35, 5, 5], max_level=35)
        assert time_window(Candidate(q, BottleneckType.QUEUE, 0.3)) == TimeWindow(2, 4)

    def test_queue_window_first_to_last_hit(self):
        q = make_queue(values=[10, 1, 1, 10, 1], max_level=10)
        assert time_window(Candidate(q, BottleneckType.QUEUE, 0.3)) == TimeWindow(0, 3)

    def test_queue_window_skips_absent(self):
        q = make_queue(values=[None, 8, None], max_level=8)
        assert time_window(Candidate(q, BottleneckType.QUEUE, 0.3)) == TimeWindow(1, 1)

    def test_queue_window_none_when_no_values(self):
        q = make_queue(values=[None, None], max_level=0)
        assert time_window(Candidate(q, BottleneckType.QUEUE, 0.0)) is None

    def test_process_window_second_half(self):
        p = make_process(values=[1] * 7, utilization_rate=0.9)
        assert time_window(Candidate(p, BottleneckType.PROCESS, 0.3)) == TimeWindow(3, 6)

    def test_process_window_needs_utilization(self):
        p = make_process(values=[1] * 7, utilization_rate=None)
        assert time_window(Candidate(p, BottleneckType.PROCESS, 0.2)) is None


# ═══════════════════════════════════════════════════════════════════════════
#  detect_bottleneck
# ═══════════════════════════════════════════════════════════════════════════


class TestDetectBottleneck:
    def test_no_candidates(self):
        v = detect_bottleneck([], [])
        assert v.primary_bottleneck == "none"
        assert v.type == BottleneckType.NONE
        assert v.confidence == 0
        assert v.time_window is None

    def test_single_queue_with_window(self):
        q = make_queue(values=[5, 5, 33, 34, 35, 5, 5], max_level=35, average_level=17.4)
        v = detect_bottleneck([q], [])
        assert v.primary_bottleneck == "queue_1_level"
        assert v.type == BottleneckType.QUEUE
        # average 17.4 / 35 misses the level rule; only persistence holds
        assert v.confidence == 0.2
        assert v.time_window == TimeWindow(2, 4)

    def test_process_beats_queue(self):
        q = make_queue(max_level=10, average_level=9, values=NOISY)
        p = make_process(values=FLAT, utilization_rate=0.99, days_at_capacity=10)
        v = detect_bottleneck([q], [p])
        assert v.primary_bottleneck == "station_1"
        assert v.type == BottleneckType.PROCESS
        assert v.confidence == 0.8
        assert v.time_window == TimeWindow(5, 9)

    def test_tie_goes_to_queue(self):
        # both score 0.3
        q = make_queue(max_level=10, average_level=9)
        p = make_process(values=NOISY, utilization_rate=0.95)
        v = detect_bottleneck([q], [p])
        assert v.type == BottleneckType.QUEUE

    def test_tie_between_queues_first_wins(self):
        q1 = make_queue(id="queue_1_level", max_level=10, average_level=9)
        q2 = make_queue(id="queue_2_level", max_level=10, average_level=9)
        assert detect_bottleneck([q1, q2], []).primary_bottleneck == "queue_1_level"

    def test_zero_confidence_still_picks_first(self):
        q = make_queue(max_level=10, average_level=1)
        v = detect_bottleneck([q], [])
        assert v.primary_bottleneck == "queue_1_level"
        assert v.confidence == 0

    def test_confidence_two_decimals(self):
        q = make_queue(
            values=[1] * 10 + [10] * 10,
            max_level=10,
            average_level=9,
            days_above_threshold=18,
            total_days=20,
        )
        v = detect_bottleneck([q], [])
        assert v.confidence == 0.8
        assert v.to_dict()["confidence"] == 0.8

    def test_deterministic(self):
        q = make_queue(values=[5, 5, 33, 34, 35, 5, 5], max_level=35, average_level=17.4)
        p = make_process(values=FLAT, utilization_rate=0.5)
        assert detect_bottleneck([q], [p]) == detect_bottleneck([q], [p])
