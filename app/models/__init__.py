from .timing import TimingAnalysis

__all__ = [
    "TimingAnalysis",
]
