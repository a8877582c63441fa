"""
State of a single join attempt.

Each transition returns a new JoinForm; nothing here touches the store, so the
join route can run the whole validation before any write happens.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from models.tournament import MatchType
from services.rules import entry_fee, team_size


class JoinStage(str, Enum):
    browsing = "browsing"
    entering = "entering"
    validated = "validated"
    submitted = "submitted"


class JoinRejected(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class JoinForm(BaseModel):
    tournament_id: Optional[str] = None
    match_type: MatchType = MatchType.solo
    names: List[str] = []
    fee: Optional[int] = None
    stage: JoinStage = JoinStage.browsing


def open_join_form(tournament_id: str) -> JoinForm:
    return JoinForm(tournament_id=tournament_id, match_type=MatchType.solo, names=[""], stage=JoinStage.entering)


def select_type(form: JoinForm, match_type: MatchType) -> JoinForm:
    # Switching type always throws away names typed so far
    return form.model_copy(update={
        "match_type": MatchType(match_type),
        "names": [""] * team_size(match_type),
        "fee": None,
        "stage": JoinStage.entering,
    })


def set_name(form: JoinForm, index: int, name: str) -> JoinForm:
    if index < 0 or index >= len(form.names):
        raise JoinRejected(f"Player slot {index + 1} does not exist for {form.match_type.value}")
    names = list(form.names)
    names[index] = name
    return form.model_copy(update={"names": names, "fee": None, "stage": JoinStage.entering})


def fill_names(form: JoinForm, names: List[str]) -> JoinForm:
    if len(names) != len(form.names):
        raise JoinRejected(f"{form.match_type.value} needs exactly {len(form.names)} player names")
    for index, name in enumerate(names):
        form = set_name(form, index, name)
    return form


def preview_fee(form: JoinForm, base_fee: int) -> JoinForm:
    return form.model_copy(update={"fee": entry_fee(base_fee, form.match_type)})


def validate_join(form: JoinForm, balance: int, base_fee: int) -> JoinForm:
    if not form.names or any(not name.strip() for name in form.names):
        raise JoinRejected("Enter every player's name")
    fee = entry_fee(base_fee, form.match_type)
    if balance < fee:
        raise JoinRejected("Insufficient balance")
    return form.model_copy(update={"fee": fee, "stage": JoinStage.validated})


def mark_submitted(form: JoinForm) -> JoinForm:
    if form.stage != JoinStage.validated:
        raise JoinRejected("Join form has not been validated")
    return form.model_copy(update={"stage": JoinStage.submitted})
