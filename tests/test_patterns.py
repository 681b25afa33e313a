from datetime import date, timedelta

import pytest

from lottolens.engine.digit_groups import DigitGroup, get_group
from lottolens.engine.matcher import Occurrence, match, sort_by_recency
from lottolens.engine.patterns import (
    FORWARD,
    FREQUENCY_FLOOR,
    REVERSE,
    PatternBucket,
    aggregate,
    continuity,
    predict,
    rank_by_frequency,
)
from lottolens.engine.recency import recency_weights

BASE = date(2024, 1, 10)


def _occ(day_offset: int, last_digit: int, slot: str = "1st") -> Occurrence:
    number = f"310{last_digit}"
    return Occurrence(
        date=BASE + timedelta(days=day_offset),
        slot=slot,
        number=number,
        position=0,
        last_digit=last_digit,
        record_index=day_offset,
    )


def _weights(*offsets, value=1.0):
    return {BASE + timedelta(days=o): value for o in offsets}


def test_aggregate_places_occurrence_in_every_matching_group(sample_store):
    occurrences = sort_by_recency(match(sample_store, "310"))
    buckets = aggregate(occurrences)

    assert list(buckets) == [
        "pattern2", "pattern5", "pattern6", "pattern7",
        "pattern9", "pattern1", "pattern3", "pattern4",
    ]
    assert [o.number for o in buckets["pattern6"].occurrences] == ["3105", "3103", "3101"]
    assert [o.number for o in buckets["pattern1"].occurrences] == ["5310", "3101"]
    assert "pattern8" not in buckets


def test_continuity_forward_walk_scores_one():
    group = get_group("pattern6")
    occurrences = [_occ(2, 5), _occ(0, 1), _occ(1, 3)]
    weights = {BASE: 0.8, BASE + timedelta(days=1): 0.9, BASE + timedelta(days=2): 1.0}

    result = continuity(group, occurrences, weights)

    assert result.direction == FORWARD
    assert result.score == pytest.approx(1.0)
    assert result.last_digit == 5


def test_continuity_reverse_walk():
    group = get_group("pattern6")
    occurrences = [_occ(0, 9), _occ(1, 7), _occ(2, 3)]

    result = continuity(group, occurrences, _weights(0, 1, 2))

    assert result.direction == REVERSE
    assert result.score == pytest.approx(1.0)
    assert result.last_digit == 3


def test_continuity_counts_against_previous_matched_digit():
    group = DigitGroup("g", (1, 3, 5))
    # 3 then 1 breaks the walk, 5 resumes it relative to 1
    occurrences = [_occ(0, 3), _occ(1, 1), _occ(2, 5)]

    result = continuity(group, occurrences, _weights(0, 1, 2))

    # forward: 3 (counts), 1 (no), 5 (counts) -> 2/3; reverse: 3 counts, 1 counts, 5 no -> 2/3
    assert result.direction == FORWARD
    assert result.score == pytest.approx(2 / 3)


def test_continuity_ignores_digits_outside_group():
    group = DigitGroup("g", (2, 6))
    result = continuity(group, [_occ(0, 1), _occ(1, 3)], _weights(0, 1))

    assert result.score == 0.0
    assert result.direction == FORWARD
    assert result.last_digit == 3


def test_continuity_without_occurrences():
    result = continuity(get_group("pattern1"), [], {})
    assert result.direction is None
    assert result.score == 0.0
    assert result.last_digit is None


def test_rank_by_frequency_weights_and_floor():
    group = get_group("pattern7")  # 1, 3, 7, 9
    occurrences = [_occ(0, 3), _occ(1, 9), _occ(2, 9)]
    weights = {BASE: 0.5, BASE + timedelta(days=1): 0.2, BASE + timedelta(days=2): 0.25}

    # 9 -> 0.45, 3 -> 0.5, 1 and 7 -> floor, tie kept in group order
    assert rank_by_frequency(group, occurrences, weights) == [3, 9, 1, 7]


def test_rank_by_frequency_floor_ties_with_min_weight_keep_group_order():
    group = DigitGroup("g", (4, 2))
    weights = {BASE: FREQUENCY_FLOOR}
    assert rank_by_frequency(group, [_occ(0, 2)], weights) == [4, 2]


def test_predict_empty_bucket_returns_group_digits():
    group = get_group("pattern8")
    assert predict(PatternBucket(group=group), {}) == [2, 6, 8]


def test_predict_follows_forward_sequence():
    group = get_group("pattern6")
    bucket = PatternBucket(group=group, occurrences=[_occ(2, 5), _occ(1, 3), _occ(0, 1)])
    weights = {BASE: 0.8, BASE + timedelta(days=1): 0.9, BASE + timedelta(days=2): 1.0}

    assert predict(bucket, weights) == [7, 5, 3, 1, 9]


def test_predict_wraps_at_end_of_sequence():
    group = get_group("pattern2")  # 0, 4, 5
    bucket = PatternBucket(group=group, occurrences=[_occ(0, 5)])

    # a single point always continues; at the end wrap to 0 then step back to 4
    assert predict(bucket, _weights(0)) == [0, 4, 5]


def test_predict_falls_back_to_frequency_below_threshold():
    group = DigitGroup("g", (1, 3, 5))
    # no score can reach the threshold, so only the frequency ranking is used
    bucket = PatternBucket(group=group, occurrences=[_occ(0, 5), _occ(1, 3), _occ(2, 3)])
    weights = {BASE: 0.1, BASE + timedelta(days=1): 0.5, BASE + timedelta(days=2): 0.5}

    assert predict(bucket, weights, threshold=1.01) == [3, 5, 1]


def test_predict_never_empty_for_non_empty_group():
    for key in ("pattern1", "pattern5", "pattern9"):
        group = get_group(key)
        bucket = PatternBucket(group=group, occurrences=[_occ(0, group.digits[-1])])
        result = predict(bucket, _weights(0))
        assert result
        assert sorted(result) == sorted(group.digits)


def test_example_odd_walk_predicts_seven(sample_store):
    occurrences = sort_by_recency(match(sample_store, "310"))
    buckets = aggregate(occurrences)
    weights = recency_weights(sample_store, sample_store.latest_date, 14)

    analysis = continuity(buckets["pattern6"].group, buckets["pattern6"].occurrences, weights)
    assert analysis.direction == FORWARD
    assert analysis.score == pytest.approx(1.0)
    assert predict(buckets["pattern6"], weights)[0] == 7
