"""
LottoLens Engine - Occurrence Matching and Pattern Scoring
==========================================================

Components:
- RecordStore: immutable, date-sorted draw records
- Digit groups: fixed digit "patterns" used to classify last digits
- Matcher: finds query occurrences inside draw numbers
- Recency weights: linear decay from the latest draw date
- Pattern aggregation, continuity analysis and prediction
- analyze(): the query boundary returning an AnalysisResult
"""

from .exceptions import (
    LottoLensError,
    NoDataError,
    InvalidQueryError,
    DataLoadError
)

from .digit_groups import DigitGroup, DIGIT_GROUPS, groups_for_digit, get_group
from .record_store import DrawRecord, RecordStore
from .matcher import MatchMode, Occurrence, match, sort_by_recency
from .recency import MIN_WEIGHT, DEFAULT_WINDOW_DAYS, recency_weights
from .patterns import (
    PatternBucket,
    Continuity,
    aggregate,
    continuity,
    rank_by_frequency,
    predict
)
from .analyzer import (
    AnalysisOptions,
    AnalysisResult,
    StoreOverview,
    analyze,
    describe_store,
    validate_query
)

__all__ = [
    # Errors
    'LottoLensError',
    'NoDataError',
    'InvalidQueryError',
    'DataLoadError',

    # Data model
    'DigitGroup',
    'DIGIT_GROUPS',
    'groups_for_digit',
    'get_group',
    'DrawRecord',
    'RecordStore',
    'MatchMode',
    'Occurrence',

    # Scoring
    'match',
    'sort_by_recency',
    'MIN_WEIGHT',
    'DEFAULT_WINDOW_DAYS',
    'recency_weights',
    'PatternBucket',
    'Continuity',
    'aggregate',
    'continuity',
    'rank_by_frequency',
    'predict',

    # Query boundary
    'AnalysisOptions',
    'AnalysisResult',
    'StoreOverview',
    'analyze',
    'describe_store',
    'validate_query',
]
