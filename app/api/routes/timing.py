from fastapi import APIRouter, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, Iterable, Optional
from uuid import uuid4
import logging

from ...models import TimingAnalysis
from ...schemas.timing import TimingAnalyzeRequest, TimingResponse
from ...services.combat_events import CombatEvent
from ...services.encounter_replay import replay_encounter
from ...services.errors import EventOrderError
from ...services.caster_tax_analyser import CASTER_TAX_TITLE, SPELL_SPEED_TITLE
from ...services.statistics import Statistics, format_duration

router = APIRouter()
logger = logging.getLogger(__name__)

# In-memory storage for demo mode (when DB unavailable)
_demo_analyses: Dict[str, Dict[str, Any]] = {}

_COLUMNS = {c.name for c in TimingAnalysis.__table__.columns}


def run_timing_analysis(
    events: Iterable[CombatEvent],
    actor_id: int,
    report_code: Optional[str] = None,
    fight_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Replay events and build the analysis payload.

    Raises:
        HTTPException: 422 if the events are out of order or cannot support
            an estimate.
    """
    statistics = Statistics()
    try:
        analyser = replay_encounter(events, actor_id, statistics=statistics)
    except EventOrderError as e:
        raise HTTPException(status_code=422, detail=str(e))

    report = analyser.report
    if report.timing is None:
        raise HTTPException(
            status_code=422,
            detail=f"Insufficient data: {report.insufficient_data_reason}",
        )

    return {
        "id": str(uuid4()),
        "actor_id": actor_id,
        "report_code": report_code,
        "fight_id": fight_id,
        "spell_speed": report.timing.spell_speed,
        "caster_tax_ms": report.timing.caster_tax,
        "spell_speed_floor": report.spell_speed_floor,
        "leftover_mean_ms": report.evaluation.leftover_mean,
        "queued_count": report.evaluation.queued_count,
        "record_count": report.record_count,
        "used_record_count": report.used_record_count,
        "statistics": statistics.as_dict(),
        "created_at": None,
    }


async def save_analysis(analysis: Dict[str, Any]) -> Dict[str, Any]:
    """Persist an analysis, keeping it in memory if the database is unavailable."""
    from ...database import AsyncSessionLocal
    if AsyncSessionLocal is not None:
        try:
            async with AsyncSessionLocal() as db:
                row = TimingAnalysis(**{k: v for k, v in analysis.items() if k in _COLUMNS})
                db.add(row)
                await db.commit()
                await db.refresh(row)
                analysis["created_at"] = row.created_at
                return analysis
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database unavailable, keeping analysis in memory: {e}")

    _demo_analyses[analysis["id"]] = analysis
    return analysis


@router.post("/analyze", response_model=TimingResponse)
async def analyze_events(request: TimingAnalyzeRequest):
    """Estimate spell speed and caster tax from a posted event list."""
    events = [e.to_event() for e in request.events]
    analysis = run_timing_analysis(events, request.actor_id)
    return await save_analysis(analysis)


@router.get("/{analysis_id}", response_model=TimingResponse)
async def get_analysis(analysis_id: str):
    """Get a stored analysis by ID."""
    # Check demo analyses first
    if analysis_id in _demo_analyses:
        return _demo_analyses[analysis_id]

    from ...database import AsyncSessionLocal
    if AsyncSessionLocal is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    try:
        async with AsyncSessionLocal() as db:
            result = await db.execute(
                select(TimingAnalysis).where(TimingAnalysis.id == analysis_id)
            )
            row = result.scalar_one_or_none()
    except (SQLAlchemyError, OSError):
        raise HTTPException(status_code=404, detail="Analysis not found")
    if not row:
        raise HTTPException(status_code=404, detail="Analysis not found")
    response = TimingResponse.model_validate(row)
    response.statistics = {
        CASTER_TAX_TITLE: format_duration(row.caster_tax_ms, 3),
        SPELL_SPEED_TITLE: row.spell_speed,
    }
    return response
