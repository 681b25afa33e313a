"""
LottoLens - Query Analyzer
==========================

The analyze() boundary: validates a digit query, matches it against the
record store and builds per-group predictions with supporting statistics.

Pipeline:
    RecordStore + query -> match -> aggregate -> (weights, continuity)
    -> predict -> AnalysisResult
"""

import datetime
import re
from datetime import date
from typing import Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from ..date_utils import DateManager
from .digit_groups import DIGIT_GROUPS, DigitGroup, groups_for_digit
from .exceptions import InvalidQueryError, NoDataError
from .matcher import MatchMode, Occurrence, match, sort_by_recency
from .patterns import CONTINUITY_THRESHOLD, PatternBucket, aggregate, continuity, predict
from .recency import DEFAULT_WINDOW_DAYS, recency_weights, resolve_window, weight_for
from .record_store import RecordStore

QUERY_PATTERN = re.compile(r"[0-9]{1,3}")

# Prize slot priorities (higher value = higher priority)
SLOT_PRIORITIES: Dict[str, int] = {
    "1st": 10,
    "2nd": 9,
    "3rd": 8,
    "5000": 7,
    "2000": 6,
    "1000": 5,
    "500": 4,
    "200": 3,
    "100": 2,
}
DEFAULT_SLOT_PRIORITY = 1
HIGH_VALUE_SLOTS = ("1st", "2nd", "3rd", "5000")
RECENT_MATCHES = 5


class AnalysisOptions(BaseModel):
    mode: MatchMode = Field(MatchMode.CONTAINS, description="contains or prefix matching")
    recency_window_days: int = Field(DEFAULT_WINDOW_DAYS, description="Days until recency weight bottoms out")
    query_width: int = Field(3, ge=1, description="Width the query is left-padded to with zeros")
    number_width: Optional[int] = Field(4, ge=1, description="Width draw numbers are left-padded to")
    threshold: float = Field(CONTINUITY_THRESHOLD, ge=0.0, le=1.0, description="Continuity score needed to follow a sequence")
    top_n: int = Field(4, ge=1, description="Predicted numbers returned per group")

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        return MatchMode.parse(value)


class OccurrenceView(BaseModel):
    date: datetime.date
    slot: str
    number: str
    position: int
    last_digit: int
    record_index: int
    groups: List[str] = Field(default_factory=list, description="Digit groups containing the last digit")
    predicted_numbers: List[str] = Field(default_factory=list, description="Union of top predictions of its groups")


class ContinuityView(BaseModel):
    direction: Optional[str] = Field(None, description="forward, reverse or null")
    score: float
    last_digit: Optional[int] = None


class GroupPrediction(BaseModel):
    group: str
    digits: List[int]
    predicted_digits: List[int]
    predicted_numbers: List[str]
    occurrence_count: int
    recent_occurrences: int
    weighted_score: float
    continuity: ContinuityView
    confidence: str
    reasoning: str


class MatchSummary(BaseModel):
    total_occurrences: int = 0
    unique_dates: int = 0
    pattern_count: int = 0
    high_value_hits: int = 0
    records_analyzed: int = 0
    slot_counts: Dict[str, int] = Field(default_factory=dict)


class AnalysisResult(BaseModel):
    """Complete analysis response for one query"""
    query: str
    padded_query: str
    mode: MatchMode
    recency_window_days: float
    latest_date: date
    target_date: date
    matches: List[OccurrenceView]
    group_predictions: List[GroupPrediction]
    summary: MatchSummary


class StoreOverview(BaseModel):
    records: int
    entries: int
    slots: List[str]
    earliest_date: Optional[date] = None
    latest_date: Optional[date] = None


def validate_query(query, query_width: Optional[int] = 3) -> str:
    """
    Validate a raw query and left-pad it with zeros.

    Raises:
        InvalidQueryError: If the query is not 1-3 ASCII digits
    """
    if not isinstance(query, str):
        raise InvalidQueryError(f"Query must be a string of 1-3 digits, got {type(query).__name__}")
    text = query.strip()
    if not QUERY_PATTERN.fullmatch(text):
        raise InvalidQueryError(f"Query must be 1-3 digits (numbers only), got '{query}'")
    return text.zfill(query_width) if query_width else text


def slot_priority(slot: str) -> int:
    return SLOT_PRIORITIES.get(slot, DEFAULT_SLOT_PRIORITY)


def classify_confidence(weighted_score: float, total_weighted: float,
                        occurrence_count: int, recent_count: int) -> str:
    """
    Rate a group prediction as high, medium or low.

    The ratio is the group's share of the recency and slot weighted score
    of all matches (scaled to 0-10), not a share of raw occurrence counts.
    recent_count is the number of the group's occurrences among the most
    recent matches overall, not the first entries of its own list.
    """
    ratio = (weighted_score / total_weighted) * 10 if total_weighted > 0 else 0.0
    if ratio > 6 or (recent_count >= 2 and occurrence_count >= 3):
        return "high"
    if ratio > 3 or recent_count >= 1:
        return "medium"
    return "low"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def build_reasoning(group: DigitGroup, occurrences: Sequence[Occurrence], recent_count: int) -> str:
    digits = ", ".join(str(d) for d in group.digits)
    text = f"Pattern {group.key} [{digits}] appeared {_plural(len(occurrences), 'time')}"
    if recent_count > 0:
        text += f", with {_plural(recent_count, 'recent occurrence')}"
    high_value = sum(1 for occ in occurrences if occ.slot in HIGH_VALUE_SLOTS)
    if high_value > 0:
        text += f". Found in {_plural(high_value, 'high-value prize slot')}"
    return text + "."


def summarize_matches(occurrences: Sequence[Occurrence], pattern_count: int, records_analyzed: int) -> MatchSummary:
    """Aggregate counts over the match list"""
    if not occurrences:
        return MatchSummary(pattern_count=pattern_count, records_analyzed=records_analyzed)

    df = pd.DataFrame([occ.to_dict() for occ in occurrences])
    slot_counts = df["slot"].value_counts(sort=False)
    return MatchSummary(
        total_occurrences=len(df),
        unique_dates=int(df["date"].nunique()),
        pattern_count=pattern_count,
        high_value_hits=int(df["slot"].isin(HIGH_VALUE_SLOTS).sum()),
        records_analyzed=records_analyzed,
        slot_counts={str(slot): int(count) for slot, count in slot_counts.items()},
    )


def describe_store(store: RecordStore) -> StoreOverview:
    """Dataset-level counts for health and overview endpoints"""
    df = store.to_frame()
    return StoreOverview(
        records=len(store),
        entries=len(df),
        slots=[str(slot) for slot in df["slot"].drop_duplicates()],
        earliest_date=store.earliest_date,
        latest_date=store.latest_date,
    )


def analyze(
    store: Optional[RecordStore],
    query: str,
    options: Optional[AnalysisOptions] = None,
    groups: Sequence[DigitGroup] = DIGIT_GROUPS,
) -> AnalysisResult:
    """
    Run the full occurrence and prediction analysis for one query.

    Args:
        store: Loaded record store
        query: Raw 1-3 digit query string
        options: Matching and scoring options (defaults if omitted)
        groups: Digit-group table

    Returns:
        AnalysisResult with matches (most recent first) and group predictions

    Raises:
        NoDataError: If the store is absent or empty
        InvalidQueryError: If the query is malformed
    """
    if store is None or store.is_empty:
        raise NoDataError("Draw data is not available; load the record store first")

    options = options or AnalysisOptions()
    padded = validate_query(query, options.query_width)
    window = resolve_window(options.recency_window_days)

    occurrences = sort_by_recency(match(store, padded, options.mode, options.number_width))
    weights = recency_weights(store, store.latest_date, window)
    buckets = aggregate(occurrences, groups)

    recent_ids = {id(occ) for occ in occurrences[:RECENT_MATCHES]}
    total_weighted = sum(weight_for(weights, occ.date) * slot_priority(occ.slot) for occ in occurrences)
    table_order = {group.key: position for position, group in enumerate(groups)}

    predictions: List[GroupPrediction] = []
    top_digits: Dict[str, List[int]] = {}
    for key, bucket in buckets.items():
        predictions.append(_predict_group(bucket, weights, options, padded, recent_ids, total_weighted))
        top_digits[key] = predictions[-1].predicted_digits[:options.top_n]

    predictions.sort(key=lambda p: (-p.weighted_score, table_order.get(p.group, len(table_order))))

    matches = []
    for occ in occurrences:
        member_keys = [group.key for group in groups_for_digit(occ.last_digit, groups)]
        digits = sorted({d for k in member_keys for d in top_digits.get(k, [])})
        matches.append(OccurrenceView(
            **occ.to_dict(),
            groups=member_keys,
            predicted_numbers=[padded + str(d) for d in digits],
        ))

    result = AnalysisResult(
        query=query.strip(),
        padded_query=padded,
        mode=options.mode,
        recency_window_days=window,
        latest_date=store.latest_date,
        target_date=DateManager.next_day(store.latest_date),
        matches=matches,
        group_predictions=predictions,
        summary=summarize_matches(occurrences, len(buckets), len(store)),
    )
    logger.info(
        f"Analysis for '{padded}' ({options.mode.value}): {len(occurrences)} matches, "
        f"{len(predictions)} pattern groups"
    )
    return result


def _predict_group(bucket: PatternBucket, weights, options: AnalysisOptions, padded: str,
                   recent_ids, total_weighted: float) -> GroupPrediction:
    group = bucket.group
    occs = bucket.occurrences
    analysis = continuity(group, occs, weights)
    digits = predict(bucket, weights, options.threshold, analysis=analysis)

    recent_count = sum(1 for occ in occs if id(occ) in recent_ids)
    weighted = sum(weight_for(weights, occ.date) * slot_priority(occ.slot) for occ in occs)

    return GroupPrediction(
        group=group.key,
        digits=list(group.digits),
        predicted_digits=digits,
        predicted_numbers=[padded + str(d) for d in digits[:options.top_n]],
        occurrence_count=len(occs),
        recent_occurrences=recent_count,
        weighted_score=round(weighted, 6),
        continuity=ContinuityView(
            direction=analysis.direction,
            score=analysis.score,
            last_digit=analysis.last_digit,
        ),
        confidence=classify_confidence(weighted, total_weighted, len(occs), recent_count),
        reasoning=build_reasoning(group, occs, recent_count),
    )
