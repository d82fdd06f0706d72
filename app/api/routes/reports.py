from fastapi import APIRouter, Depends, HTTPException, Query

from ...schemas.reports import ReportResponse
from ...schemas.timing import TimingResponse
from ...services.errors import ReportError, ReportNotFoundError
from ...services.fflogs_client import FFLogsClient
from ...services.report_store import Report, ReportStore
from .timing import run_timing_analysis, save_analysis

router = APIRouter()


async def get_report_store():
    """Dependency providing a report store with its own HTTP client."""
    store = ReportStore(FFLogsClient())
    try:
        yield store
    finally:
        await store.client.close()


def _raise_for(error: ReportError):
    if isinstance(error, ReportNotFoundError):
        raise HTTPException(status_code=404, detail=str(error))
    raise HTTPException(status_code=502, detail=f"Log API request failed: {error}")


async def _load_report(store: ReportStore, code: str) -> Report:
    report = await store.fetch_report_if_needed(code)
    if report is None:
        _raise_for(store.error)
    return report


@router.get("/{code}", response_model=ReportResponse)
async def get_report(code: str, store: ReportStore = Depends(get_report_store)):
    """Get a report's fights and friendly actors."""
    report = await _load_report(store, code)
    return ReportResponse.model_validate(report)


@router.post("/{code}/fights/{fight_id}/timing", response_model=TimingResponse)
async def analyze_fight(
    code: str,
    fight_id: int,
    actor_id: int = Query(..., description="Player to analyse"),
    store: ReportStore = Depends(get_report_store),
):
    """Fetch one player's events for a fight and estimate their cast timing."""
    report = await _load_report(store, code)

    fight = report.get_fight(fight_id)
    if fight is None:
        raise HTTPException(status_code=404, detail=f"Fight {fight_id} not found in report {code}")
    if report.get_actor(actor_id) is None:
        raise HTTPException(status_code=404, detail=f"Actor {actor_id} not found in report {code}")

    try:
        events = await store.fetch_fight_events(fight, actor_id)
    except ReportError as e:
        _raise_for(e)

    analysis = run_timing_analysis(events, actor_id, report_code=code, fight_id=fight_id)
    return await save_analysis(analysis)
