"""Summary statistics published by analysers."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class SimpleStatistic:
    """A single titled value shown alongside an analysis."""
    title: str
    value: Union[str, int, float]
    info: Optional[str] = None


@dataclass
class Statistics:
    """Collects statistics from all analysers for one encounter."""
    statistics: List[SimpleStatistic] = field(default_factory=list)

    def add(self, statistic: SimpleStatistic) -> None:
        self.statistics.append(statistic)

    def as_dict(self) -> Dict[str, Union[str, int, float]]:
        return {s.title: s.value for s in self.statistics}


def format_duration(duration_ms: float, second_precision: Optional[int] = None) -> str:
    """Format a millisecond duration as `1.234s` or `m:ss.sss`.

    Args:
        duration_ms: Duration in milliseconds, may be negative
        second_precision: Decimal places on the seconds part. Defaults to 2
            below one minute and 0 above.
    """
    sign = "-" if duration_ms < 0 else ""
    seconds = abs(duration_ms) / 1000

    if seconds < 60:
        precision = 2 if second_precision is None else second_precision
        return f"{sign}{seconds:.{precision}f}s"

    precision = 0 if second_precision is None else second_precision
    minutes = int(seconds // 60)
    remainder = seconds - minutes * 60
    width = 2 + (precision + 1 if precision > 0 else 0)
    return f"{sign}{minutes}:{remainder:0{width}.{precision}f}"
