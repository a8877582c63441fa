from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional
from services.database import default_id


class MatchType(str, Enum):
    solo = "Solo"
    duo = "Duo"
    squad = "Squad"


class MatchStatus(str, Enum):
    upcoming = "Upcoming"
    live = "Live"
    finished = "Finished"


class PlayerRecord(BaseModel):
    user_id: str
    names: List[str]
    participation_type: MatchType
    kills: Optional[int] = None
    rank: Optional[int] = None


class Tournament(BaseModel):
    id: str = Field(default_factory=default_id, alias="_id")
    title: str
    match_type: MatchType = MatchType.solo
    base_entry_fee: int = Field(ge=0)
    per_kill: int = 0
    prize1: int = 0
    prize2: int = 0
    prize3: int = 0
    start_time: int
    max_players: int = Field(gt=0)
    joined_players: List[PlayerRecord] = []
    status: Optional[MatchStatus] = None
    room_id: Optional[str] = None
    room_pass: Optional[str] = None
    map: str = ""


class CreateTournamentRequest(BaseModel):
    title: str
    match_type: MatchType = MatchType.solo
    base_entry_fee: int = Field(ge=0)
    per_kill: int = Field(default=0, ge=0)
    prize1: int = Field(default=0, ge=0)
    prize2: int = Field(default=0, ge=0)
    prize3: int = Field(default=0, ge=0)
    start_time: int
    max_players: int = Field(gt=0)
    map: str = ""
    room_id: Optional[str] = None
    room_pass: Optional[str] = None


class UpdateTournamentRequest(BaseModel):
    title: Optional[str] = None
    match_type: Optional[MatchType] = None
    base_entry_fee: Optional[int] = Field(default=None, ge=0)
    per_kill: Optional[int] = Field(default=None, ge=0)
    prize1: Optional[int] = Field(default=None, ge=0)
    prize2: Optional[int] = Field(default=None, ge=0)
    prize3: Optional[int] = Field(default=None, ge=0)
    start_time: Optional[int] = None
    max_players: Optional[int] = Field(default=None, gt=0)
    map: Optional[str] = None
    status: Optional[MatchStatus] = None
    room_id: Optional[str] = None
    room_pass: Optional[str] = None


class PlayerResult(BaseModel):
    user_id: str
    kills: Optional[int] = Field(default=None, ge=0)
    rank: Optional[int] = Field(default=None, ge=1)


class TournamentResultsRequest(BaseModel):
    results: List[PlayerResult]


class JoinTournamentRequest(BaseModel):
    match_type: MatchType = MatchType.solo
    names: List[str]


class TournamentCard(BaseModel):
    id: str
    title: str
    match_type: MatchType
    base_entry_fee: int
    per_kill: int
    prize1: int
    prize2: int
    prize3: int
    start_time: int
    max_players: int
    map: str
    derived_status: MatchStatus
    players_joined: int
    is_joined: bool
    my_participation_type: Optional[MatchType] = None
    join_state: str
    room_id: Optional[str] = None
    room_pass: Optional[str] = None


class TeamEntry(BaseModel):
    team: int
    participation_type: MatchType
    names: List[str]
    kills: Optional[int] = None
    rank: Optional[int] = None
