"""Tournament timing and entry-fee rules shared by every view and write path."""
import time
from typing import Optional

from models.tournament import MatchStatus, MatchType

# Room opens 10 minutes before start, match runs 20 minutes after it
JOIN_CUTOFF_MS = 10 * 60 * 1000
MATCH_DURATION_MS = 20 * 60 * 1000

TEAM_SIZES = {
    MatchType.solo: 1,
    MatchType.duo: 2,
    MatchType.squad: 4,
}


def now_ms() -> int:
    return int(time.time() * 1000)


def derive_status(start_time: int, stored_status: Optional[MatchStatus] = None, now: Optional[int] = None) -> MatchStatus:
    """Status shown to users. A stored Finished always wins (admin force-finish)."""
    if stored_status is not None and MatchStatus(stored_status) == MatchStatus.finished:
        return MatchStatus.finished

    if now is None:
        now = now_ms()

    if now < start_time - JOIN_CUTOFF_MS:
        return MatchStatus.upcoming
    if now < start_time + MATCH_DURATION_MS:
        return MatchStatus.live
    return MatchStatus.finished


def team_size(match_type: MatchType) -> int:
    return TEAM_SIZES[MatchType(match_type)]


def entry_fee(base_fee: int, match_type: MatchType) -> int:
    return base_fee * team_size(match_type)
