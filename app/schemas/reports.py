from pydantic import BaseModel
from typing import Optional, List


class FightResponse(BaseModel):
    id: int
    name: str
    start_time: int
    end_time: int
    duration_ms: int
    boss: int = 0
    kill: Optional[bool] = None

    class Config:
        from_attributes = True


class ReportActorResponse(BaseModel):
    id: int
    name: str
    type: str  # job, e.g. 'BlackMage'
    fight_ids: List[int] = []

    class Config:
        from_attributes = True


class ReportResponse(BaseModel):
    code: str
    title: str
    fights: List[FightResponse]
    friendlies: List[ReportActorResponse]

    class Config:
        from_attributes = True
