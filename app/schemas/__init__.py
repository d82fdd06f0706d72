from .timing import CombatEventIn, TimingAnalyzeRequest, TimingResponse
from .reports import FightResponse, ReportActorResponse, ReportResponse

__all__ = [
    "CombatEventIn", "TimingAnalyzeRequest", "TimingResponse",
    "FightResponse", "ReportActorResponse", "ReportResponse",
]
