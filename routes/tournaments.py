from typing import List

from fastapi import APIRouter, Depends, HTTPException
from models.tournament import JoinTournamentRequest, MatchType, TeamEntry, TournamentCard
from models.user import UserInDB
from services.auth import get_current_user
from services.join_form import JoinForm, JoinRejected, fill_names, open_join_form, preview_fee, select_type
from services.support import get_marquee, get_notices
from services.tournament import get_all_tournaments, get_joined_tournaments, get_tournament_or_404, join_tournament
from services.views import active_cards, joined_cards, player_list, tournament_card
from services.websocket import publish
from fastapi.encoders import jsonable_encoder

router = APIRouter()


@router.get("/tournaments")
async def home(user: UserInDB = Depends(get_current_user)):
    tournaments = await get_all_tournaments()
    return {
        "tournaments": jsonable_encoder(active_cards(tournaments, user)),
        "notices": jsonable_encoder(await get_notices(), by_alias=True),
        "marquee": await get_marquee(),
        "balance": user.balance,
    }


@router.get("/tournaments/mine", response_model=List[TournamentCard])
async def my_matches(user: UserInDB = Depends(get_current_user)):
    return joined_cards(await get_joined_tournaments(user.id), user)


@router.get("/tournaments/{tournament_id}", response_model=TournamentCard)
async def read_tournament(tournament_id: str, user: UserInDB = Depends(get_current_user)):
    tournament = await get_tournament_or_404(tournament_id)
    return tournament_card(tournament, user)


@router.get("/tournaments/{tournament_id}/players", response_model=List[TeamEntry])
async def read_players(tournament_id: str):
    tournament = await get_tournament_or_404(tournament_id)
    return player_list(tournament)


@router.get("/tournaments/{tournament_id}/join-form", response_model=JoinForm)
async def read_join_form(tournament_id: str, match_type: MatchType = MatchType.solo):
    tournament = await get_tournament_or_404(tournament_id)
    form = select_type(open_join_form(tournament.id), match_type)
    return preview_fee(form, tournament.base_entry_fee)


@router.post("/tournaments/{tournament_id}/join", response_model=TournamentCard)
async def join(tournament_id: str, request: JoinTournamentRequest, user: UserInDB = Depends(get_current_user)):
    tournament = await get_tournament_or_404(tournament_id)
    try:
        form = fill_names(select_type(open_join_form(tournament.id), request.match_type), request.names)
        tournament = await join_tournament(tournament, user, form)
    except JoinRejected as rejection:
        raise HTTPException(status_code=400, detail=rejection.reason)

    await publish("tournaments")
    await publish("profile", [user.id])
    return tournament_card(tournament, user)
