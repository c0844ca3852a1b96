import time
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


def percentage(score: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half-up rounding: 2.5 -> 3, not banker's rounding
    return int(100 * score / total + 0.5)


class ScoreRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: str                   # Easy, Normal, Hard
    score: int
    total: int
    percentage: int              # round(100 * score / total)
    date: str                    # local time, for display
    timestamp: int               # ms since the epoch


def build_record(level: str, score: int, total: int, now: Optional[float] = None) -> ScoreRecord:
    """Create the single record a finished round produces."""
    now = time.time() if now is None else now
    return ScoreRecord(
        level=level,
        score=score,
        total=total,
        percentage=percentage(score, total),
        date=datetime.fromtimestamp(now).strftime('%Y-%m-%d %H:%M:%S'),
        timestamp=int(now * 1000),
    )
