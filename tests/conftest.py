import json
import os
import sys
from datetime import date

import pytest

# Ensure repository root is on sys.path so `import lottolens.*` works during tests
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from lottolens.engine.record_store import RecordStore  # noqa: E402


SAMPLE_DAYS = [
    {"date": "2024-01-01", "result": {"1st": "0102", "2nd": ["3101", "1234"]}},
    {"date": "03-01-2024", "result": {"1st": "3103", "100": ["abc", None, "5310"]}},
    {"date": "2024-01-05", "result": {"1st": "3105"}},
]


@pytest.fixture
def sample_days():
    """Raw dataset mixing ISO and day-first dates plus malformed slot values"""
    return json.loads(json.dumps(SAMPLE_DAYS))


@pytest.fixture
def sample_store():
    return RecordStore([
        (date(2024, 1, 1), {"1st": ["0102"], "2nd": ["3101", "1234"]}),
        (date(2024, 1, 3), {"1st": ["3103"], "100": ["abc", None, "5310"]}),
        (date(2024, 1, 5), {"1st": ["3105"]}),
    ])


@pytest.fixture
def sample_json_file(tmp_path, sample_days):
    path = tmp_path / "draws.json"
    path.write_text(json.dumps(sample_days), encoding="utf-8")
    return str(path)
