"""
LottoLens - Occurrence Matcher
==============================

Scans every slot entry of every draw record for numbers that contain (or
start with) the query digits.
"""

from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional

from loguru import logger

from .record_store import DrawRecord


class MatchMode(str, Enum):
    """How the query is compared against a draw number"""
    CONTAINS = "contains"
    PREFIX = "prefix"

    @classmethod
    def parse(cls, value) -> "MatchMode":
        """Accept enum members, their values and the legacy alias 'any'"""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text in ("", "any"):
            return cls.CONTAINS
        return cls(text)


@dataclass(frozen=True)
class Occurrence:
    """A single appearance of the query inside a draw number"""
    date: date
    slot: str
    number: str
    position: int
    last_digit: int
    record_index: int

    def to_dict(self) -> Dict:
        return asdict(self)


def normalize_number(value, number_width: Optional[int] = None) -> Optional[str]:
    """
    Convert a raw slot value to a digit string.

    Args:
        value: Raw value (int or str)
        number_width: Left-pad numeric strings shorter than this with zeros

    Returns:
        Digit string, or None if the value is empty or not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text or not (text.isascii() and text.isdigit()):
        return None
    if number_width and len(text) < number_width:
        text = text.zfill(number_width)
    return text


def match(
    records: Iterable[DrawRecord],
    query: str,
    mode=MatchMode.CONTAINS,
    number_width: Optional[int] = 4,
) -> List[Occurrence]:
    """
    Find every occurrence of the query in the records.

    Args:
        records: Draw records to scan
        query: Digit string (already validated and padded)
        mode: MatchMode.CONTAINS or MatchMode.PREFIX
        number_width: Width draw numbers are padded to before comparison

    Returns:
        Occurrences in record order, then slot order
    """
    mode = MatchMode.parse(mode)
    occurrences: List[Occurrence] = []
    skipped = 0

    for record in records:
        for slot, raw in record.iter_numbers():
            number = normalize_number(raw, number_width)
            if number is None:
                skipped += 1
                continue

            if mode is MatchMode.PREFIX:
                matched = number.startswith(query)
            else:
                matched = query in number
            if not matched:
                continue

            occurrences.append(Occurrence(
                date=record.date,
                slot=slot,
                number=number,
                position=number.find(query),
                last_digit=int(number[-1]),
                record_index=record.record_index,
            ))

    if skipped:
        logger.debug(f"Skipped {skipped} malformed slot values while matching '{query}'")
    logger.debug(f"Matcher found {len(occurrences)} occurrences of '{query}' (mode={mode.value})")
    return occurrences


def sort_by_recency(occurrences: Iterable[Occurrence]) -> List[Occurrence]:
    """Most recent record first; stable within a record"""
    return sorted(occurrences, key=lambda occ: occ.record_index, reverse=True)
