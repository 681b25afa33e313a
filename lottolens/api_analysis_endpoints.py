"""
LottoLens Analysis API Endpoints
================================

JSON endpoints over the analysis engine:
- GET /api/v1/health    - data availability
- GET /api/v1/analysis  - occurrence matching and group predictions
- GET /api/v1/groups    - the digit-group table
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from loguru import logger
from pydantic import ValidationError

from lottolens.engine import (
    DIGIT_GROUPS,
    AnalysisOptions,
    AnalysisResult,
    InvalidQueryError,
    NoDataError,
    RecordStore,
    analyze,
    describe_store,
)
from lottolens.engine.matcher import MatchMode

analysis_router = APIRouter(prefix="/api/v1", tags=["analysis"])


class StoreHolder:
    """Holds the record store once the startup load has finished"""

    def __init__(self, store: Optional[RecordStore] = None):
        self.store = store

    @property
    def ready(self) -> bool:
        return self.store is not None and not self.store.is_empty


def _holder(request: Request) -> StoreHolder:
    return request.app.state.store_holder


@analysis_router.get("/health")
async def health(request: Request) -> Dict:
    """Report whether draw data is loaded"""
    holder = _holder(request)
    if not holder.ready:
        return {"status": "data_unavailable", "records": 0, "latest_date": None}

    overview = describe_store(holder.store)
    return {
        "status": "ok",
        "records": overview.records,
        "entries": overview.entries,
        "slots": overview.slots,
        "earliest_date": overview.earliest_date,
        "latest_date": overview.latest_date,
    }


@analysis_router.get("/groups")
async def list_groups() -> List[Dict]:
    return [group.to_dict() for group in DIGIT_GROUPS]


@analysis_router.get("/analysis", response_model=AnalysisResult)
async def get_analysis(
    request: Request,
    query: str = Query(..., description="1-3 digit query"),
    mode: str = Query(MatchMode.CONTAINS.value, description="contains or prefix ('any' is read as contains)"),
    recency_window_days: Optional[int] = Query(None, description="Recency window in days"),
    top_n: Optional[int] = Query(None, ge=1, le=10, description="Predicted numbers per group"),
) -> AnalysisResult:
    """
    Analyze a digit query against the loaded draw history.

    Returns matches (most recent first) and ranked predictions per digit group.
    """
    try:
        match_mode = MatchMode.parse(mode)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown mode '{mode}', expected contains or prefix")

    settings = request.app.state.settings
    try:
        options = AnalysisOptions(
            mode=match_mode,
            recency_window_days=recency_window_days if recency_window_days is not None else settings.recency_window_days,
            query_width=settings.query_width,
            number_width=settings.number_width,
            threshold=settings.threshold,
            top_n=top_n if top_n is not None else settings.top_n,
        )
        return analyze(_holder(request).store, query, options)
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoDataError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValidationError as e:
        logger.error(f"Analysis options rejected, check the configured settings: {e}")
        raise HTTPException(status_code=500, detail="Analysis settings are misconfigured")
    except Exception as e:
        logger.error(f"Analysis failed for query {query!r}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to analyze query: {str(e)}")
