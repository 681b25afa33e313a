"""
LottoLens Data Loader
=====================

Reads the draw dataset from a JSON file or URL and normalizes the shapes
seen in published result files into a RecordStore.

Accepted shapes:
- list of day objects: {"date": ..., "result": {slot: value | [values]}}
  (the slot mapping may also live under "results" or "prizes", as a
  "slots" list of {slot|name, number}, or as the remaining top-level keys)
- object keyed by date: {"2024-01-05": {slot: value | [values]}}
"""

import json
import os
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import requests
from loguru import logger

from lottolens.date_utils import parse_draw_date
from lottolens.engine.exceptions import DataLoadError
from lottolens.engine.record_store import RecordStore

DATE_KEYS = ("date", "day", "d")
MAPPING_KEYS = ("result", "results", "prizes")


def _as_list(value) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _entries_from_mapping(mapping: Dict) -> Dict[str, List[Any]]:
    entries: Dict[str, List[Any]] = {}
    for slot, value in mapping.items():
        entries.setdefault(str(slot), []).extend(_as_list(value))
    return entries


def normalize_day(day: Dict) -> Tuple[Any, Dict[str, List[Any]]]:
    """
    Extract (raw date, {slot: [numbers]}) from one day object.
    """
    raw_date = next((day[k] for k in DATE_KEYS if k in day), None)

    for key in MAPPING_KEYS:
        if isinstance(day.get(key), dict):
            return raw_date, _entries_from_mapping(day[key])

    if isinstance(day.get("slots"), list):
        entries: Dict[str, List[Any]] = {}
        for item in day["slots"]:
            if not isinstance(item, dict):
                continue
            slot = item.get("slot", item.get("name"))
            entries.setdefault(str(slot), []).extend(_as_list(item.get("number")))
        return raw_date, entries

    flat = {k: v for k, v in day.items() if k not in DATE_KEYS}
    return raw_date, _entries_from_mapping(flat)


def normalize_records(raw) -> List[Tuple[date, Dict[str, List[Any]]]]:
    """
    Normalize a parsed JSON document into (date, entries) pairs.

    Records whose date cannot be parsed are skipped with a warning.
    """
    if not raw:
        return []

    if isinstance(raw, list):
        days = [normalize_day(day) for day in raw if isinstance(day, dict)]
    elif isinstance(raw, dict):
        days = []
        for raw_date, day in raw.items():
            entries = _entries_from_mapping(day) if isinstance(day, dict) else {}
            days.append((raw_date, entries))
    else:
        logger.warning(f"Unsupported dataset type: {type(raw).__name__}")
        return []

    records = []
    skipped = 0
    for raw_date, entries in days:
        parsed = parse_draw_date(raw_date)
        if parsed is None:
            skipped += 1
            continue
        records.append((parsed, entries))

    if skipped:
        logger.warning(f"Skipped {skipped} records with unparseable dates")
    return records


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def fetch_json(source: str, timeout: float = 15.0):
    """
    Read a JSON document from a path or http(s) URL.

    Raises:
        DataLoadError: On network, file or JSON errors
    """
    if _is_url(source):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch draw data from {source}: {e}")
            raise DataLoadError(f"Cannot fetch {source}: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {source}: {e}")
            raise DataLoadError(f"Invalid JSON from {source}: {e}") from e

    if not os.path.exists(source):
        raise DataLoadError(f"Data file not found: {source}")
    try:
        with open(source, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read draw data from {source}: {e}")
        raise DataLoadError(f"Cannot read {source}: {e}") from e


def build_record_store(raw) -> RecordStore:
    """
    Build a RecordStore from an already parsed document.

    Raises:
        DataLoadError: If no usable record remains
    """
    records = normalize_records(raw)
    if not records:
        raise DataLoadError("Dataset contains no records with a valid date")
    return RecordStore(records)


def load_record_store(source: str, timeout: float = 15.0) -> RecordStore:
    """
    Load and normalize the draw dataset.

    Args:
        source: JSON file path or http(s) URL
        timeout: HTTP timeout in seconds

    Returns:
        RecordStore sorted ascending by date

    Raises:
        DataLoadError: If the source is unavailable or holds no usable records
    """
    logger.info(f"Loading draw data from {source}")
    store = build_record_store(fetch_json(source, timeout=timeout))
    logger.info(
        f"Draw data loaded: {len(store)} records "
        f"({store.earliest_date} -> {store.latest_date})"
    )
    return store


def load_from_settings(settings) -> Optional[RecordStore]:
    """Load the configured source, returning None when it is unavailable"""
    try:
        return load_record_store(settings.data_source, timeout=settings.fetch_timeout)
    except DataLoadError as e:
        logger.error(f"Draw data unavailable: {e}")
        return None
