"""
LottoLens - Record Store
========================

Immutable, date-sorted collection of draw records. Built once from the
loaded dataset and passed explicitly into every analysis call.
"""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from loguru import logger


def _as_tuple(value) -> Tuple:
    # a bare value (str, int, None) is a single published number
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


@dataclass(frozen=True)
class DrawRecord:
    """One draw day: its date and the published numbers per prize slot"""
    date: date
    entries: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    record_index: int = -1

    def iter_numbers(self) -> Iterator[Tuple[str, str]]:
        """Yield (slot, raw number) pairs in slot order"""
        for slot, numbers in self.entries.items():
            for number in numbers:
                yield slot, number


class RecordStore:
    """
    Sorted, read-only sequence of DrawRecord.

    Records are sorted ascending by date with a stable sort, so records
    sharing a date keep their input order. record_index is the position
    after sorting.
    """

    def __init__(self, records: Iterable[Tuple[date, Mapping[str, Sequence]]]):
        """
        Args:
            records: (date, {slot: number or [numbers...]}) pairs in any order
        """
        materialized = [(d, entries) for d, entries in records]
        materialized.sort(key=lambda item: item[0])

        frozen: List[DrawRecord] = []
        for index, (draw_date, entries) in enumerate(materialized):
            slots = {str(slot): _as_tuple(numbers) for slot, numbers in entries.items()}
            frozen.append(DrawRecord(
                date=draw_date,
                entries=MappingProxyType(slots),
                record_index=index,
            ))

        self._records: Tuple[DrawRecord, ...] = tuple(frozen)
        logger.debug(f"RecordStore built with {len(self._records)} records")

    @property
    def records(self) -> Tuple[DrawRecord, ...]:
        return self._records

    @property
    def latest_date(self) -> Optional[date]:
        return self._records[-1].date if self._records else None

    @property
    def earliest_date(self) -> Optional[date]:
        return self._records[0].date if self._records else None

    @property
    def is_empty(self) -> bool:
        return not self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DrawRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> DrawRecord:
        return self._records[index]

    def to_frame(self) -> pd.DataFrame:
        """
        Flatten the store into one row per published number.

        Returns:
            DataFrame with columns [date, record_index, slot, number]
        """
        rows = [
            {"date": record.date, "record_index": record.record_index, "slot": slot, "number": number}
            for record in self._records
            for slot, number in record.iter_numbers()
        ]
        return pd.DataFrame(rows, columns=["date", "record_index", "slot", "number"])
