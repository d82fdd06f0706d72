from sqlalchemy import Column, String, Integer, Float, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.sql import func
import uuid
from ..database import Base


class TimingAnalysis(Base):
    """Spell speed and caster tax estimated for one actor in one fight."""
    __tablename__ = "timing_analyses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Source of the events; null for posted event lists
    report_code = Column(String(32), index=True)
    fight_id = Column(Integer)
    actor_id = Column(Integer, nullable=False)

    # Results, null when the casts could not support an estimate
    spell_speed = Column(Integer)
    caster_tax_ms = Column(Float)
    spell_speed_floor = Column(Integer)
    leftover_mean_ms = Column(Float)
    queued_count = Column(Integer, default=0)
    record_count = Column(Integer, default=0)
    used_record_count = Column(Integer, default=0)
    insufficient_data_reason = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
