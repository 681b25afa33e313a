"""
LottoLens - Pattern Aggregation, Continuity and Prediction
===========================================================

Components:
- aggregate: buckets occurrences by digit-group membership of their last digit
- continuity: checks whether a group's digit order is walked over time
- rank_by_frequency: recency-weighted frequency ranking within a group
- predict: combines the two into an ordered list of candidate digits
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from loguru import logger

from .digit_groups import DIGIT_GROUPS, DigitGroup
from .matcher import Occurrence
from .recency import weight_for

CONTINUITY_THRESHOLD = 0.45
FREQUENCY_FLOOR = 0.05

FORWARD = "forward"
REVERSE = "reverse"


@dataclass
class PatternBucket:
    """Occurrences whose last digit belongs to one digit group"""
    group: DigitGroup
    occurrences: List[Occurrence] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.group.key


@dataclass(frozen=True)
class Continuity:
    """Result of the sequence continuity analysis for one group"""
    direction: Optional[str]
    score: float
    last_digit: Optional[int]


def aggregate(
    occurrences: Iterable[Occurrence],
    groups: Sequence[DigitGroup] = DIGIT_GROUPS,
) -> Dict[str, PatternBucket]:
    """
    Group occurrences by every digit group containing their last digit.

    Args:
        occurrences: Matches, normally most recent first
        groups: Digit-group table

    Returns:
        Dict of group key -> PatternBucket, in order of first appearance
    """
    buckets: Dict[str, PatternBucket] = {}
    for occurrence in occurrences:
        for group in groups:
            if occurrence.last_digit not in group:
                continue
            bucket = buckets.get(group.key)
            if bucket is None:
                bucket = buckets[group.key] = PatternBucket(group=group)
            bucket.occurrences.append(occurrence)
    return buckets


def _continuity_for(ordering: Sequence[int], ordered: Sequence[Occurrence],
                    weights: Mapping[date, float]) -> float:
    positions = {digit: idx for idx, digit in enumerate(ordering)}
    prev_idx = -1
    continuity_sum = 0.0
    weight_sum = 0.0

    for occurrence in ordered:
        idx = positions.get(occurrence.last_digit)
        if idx is None:
            continue
        w = weight_for(weights, occurrence.date)
        if idx > prev_idx:
            continuity_sum += w
        weight_sum += w
        prev_idx = idx

    return continuity_sum / weight_sum if weight_sum > 0 else 0.0


def continuity(
    group: DigitGroup,
    occurrences: Sequence[Occurrence],
    weights: Mapping[date, float],
) -> Continuity:
    """
    Score how well the occurrences walk the group's digit order over time.

    Both the group order and its reverse are tried; an occurrence counts as
    continuing when its digit sits further along the ordering than the
    previous in-group digit. Ties favor the forward direction.

    Args:
        group: Digit group
        occurrences: Occurrences of the group (any order)
        weights: Recency weights by date

    Returns:
        Continuity with direction, score in [0, 1] and the latest digit seen
    """
    if not occurrences:
        return Continuity(direction=None, score=0.0, last_digit=None)

    ordered = sorted(occurrences, key=lambda occ: occ.date)
    forward_score = _continuity_for(group.digits, ordered, weights)
    reverse_score = _continuity_for(group.reversed_digits, ordered, weights)
    last_digit = ordered[-1].last_digit

    if forward_score >= reverse_score:
        return Continuity(direction=FORWARD, score=forward_score, last_digit=last_digit)
    return Continuity(direction=REVERSE, score=reverse_score, last_digit=last_digit)


def rank_by_frequency(
    group: DigitGroup,
    occurrences: Iterable[Occurrence],
    weights: Mapping[date, float],
) -> List[int]:
    """
    Rank the group's digits by recency-weighted frequency.

    Digits never observed get FREQUENCY_FLOOR so they still appear; equal
    totals keep the group's own digit order.
    """
    totals = {digit: 0.0 for digit in group.digits}
    for occurrence in occurrences:
        if occurrence.last_digit in totals:
            totals[occurrence.last_digit] += weight_for(weights, occurrence.date)

    for digit, total in totals.items():
        if total == 0:
            totals[digit] = FREQUENCY_FLOOR

    # sorted() is stable, so ties stay in group order
    return sorted(group.digits, key=lambda digit: totals[digit], reverse=True)


def _dedupe(digits: Iterable[int]) -> List[int]:
    seen = set()
    result = []
    for digit in digits:
        if digit not in seen:
            seen.add(digit)
            result.append(digit)
    return result


def predict(
    bucket: PatternBucket,
    weights: Mapping[date, float],
    threshold: float = CONTINUITY_THRESHOLD,
    analysis: Optional[Continuity] = None,
) -> List[int]:
    """
    Predict candidate next digits for a group.

    With strong continuity the next digit along the winning ordering leads,
    followed by the frequency ranking and the raw group digits. Otherwise
    the frequency ranking alone is returned.

    Args:
        bucket: Group and its occurrences
        weights: Recency weights by date
        threshold: Minimum continuity score to follow the sequence
        analysis: Precomputed continuity for the bucket, if available

    Returns:
        Ordered candidate digits, never empty
    """
    group = bucket.group
    if not bucket.occurrences:
        return list(group.digits)

    if analysis is None:
        analysis = continuity(group, bucket.occurrences, weights)
    ranking = rank_by_frequency(group, bucket.occurrences, weights)

    if analysis.score >= threshold and analysis.last_digit in group:
        sequence = group.digits if analysis.direction == FORWARD else group.reversed_digits
        idx = sequence.index(analysis.last_digit)

        if idx < len(sequence) - 1:
            candidates = [sequence[idx + 1]]
        else:
            # end of the ordering: wrap to the start, then step back one
            candidates = [sequence[0]]
            if idx >= 1:
                candidates.append(sequence[idx - 1])

        logger.debug(
            f"{group.key}: continuity {analysis.direction} {analysis.score:.2f}, "
            f"last digit {analysis.last_digit} -> {candidates}"
        )
        return _dedupe([*candidates, *ranking, *group.digits])

    return ranking
