from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Union
from datetime import datetime

from ..services.combat_events import CombatEvent, EventType


class CombatEventIn(BaseModel):
    type: EventType  # 'prepare', 'interrupt', 'action', 'complete', 'statusApply', 'statusRemove'
    timestamp: int = Field(ge=0)  # ms from fight start
    source_id: Optional[int] = None
    target_id: Optional[int] = None
    action_id: Optional[int] = None
    status_id: Optional[int] = None

    def to_event(self) -> CombatEvent:
        return CombatEvent(**self.model_dump())


class TimingAnalyzeRequest(BaseModel):
    actor_id: int
    events: List[CombatEventIn]


class TimingResponse(BaseModel):
    id: str
    actor_id: int
    report_code: Optional[str] = None
    fight_id: Optional[int] = None

    spell_speed: int
    caster_tax_ms: float
    spell_speed_floor: Optional[int] = None
    leftover_mean_ms: Optional[float] = None

    # Sample sizes
    queued_count: int = 0
    record_count: int = 0
    used_record_count: int = 0

    statistics: Dict[str, Union[str, int, float]] = {}
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
