import logging
from typing import List, Optional

from fastapi import HTTPException
from pymongo import ReturnDocument

from models.tournament import (CreateTournamentRequest, MatchStatus, PlayerRecord, Tournament,
                               TournamentResultsRequest, UpdateTournamentRequest)
from models.user import UserInDB
from services.database import get_db
from services.join_form import JoinForm, mark_submitted, validate_join
from services.rules import derive_status
from services.user import credit_balance, debit_balance

logger = logging.getLogger(__name__)


async def get_tournament(tournament_id: str) -> Optional[Tournament]:
    tournament_data = await get_db().tournaments.find_one({"_id": tournament_id})
    if tournament_data:
        return Tournament(**tournament_data)
    return None


async def get_tournament_or_404(tournament_id: str) -> Tournament:
    tournament = await get_tournament(tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="No corresponding tournament found")
    return tournament


async def get_all_tournaments() -> List[Tournament]:
    tournament_data = await get_db().tournaments.find().sort("start_time", 1).to_list(length=None)
    return [Tournament(**tournament) for tournament in tournament_data]


async def get_joined_tournaments(user_id: str) -> List[Tournament]:
    tournament_data = await get_db().tournaments.find({"joined_players.user_id": user_id}).to_list(length=None)
    return [Tournament(**tournament) for tournament in tournament_data]


async def create_new_tournament(request: CreateTournamentRequest) -> Tournament:
    new_tournament = Tournament(**request.model_dump(), joined_players=[], status=None)
    await get_db().tournaments.insert_one(new_tournament.model_dump(by_alias=True, mode="json"))
    logger.info("Created tournament %s (%s)", new_tournament.id, new_tournament.title)
    return new_tournament


async def update_tournament(tournament_id: str, request: UpdateTournamentRequest) -> Tournament:
    changes = request.model_dump(exclude_unset=True, mode="json")
    if not changes:
        raise HTTPException(status_code=400, detail="Nothing to update")
    tournament_data = await get_db().tournaments.find_one_and_update(
        {"_id": tournament_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not tournament_data:
        raise HTTPException(status_code=404, detail="No corresponding tournament found")
    logger.info("Updated tournament %s: %s", tournament_id, sorted(changes))
    return Tournament(**tournament_data)


async def record_results(tournament_id: str, request: TournamentResultsRequest) -> Tournament:
    tournament = await get_tournament_or_404(tournament_id)
    roster_ids = {record.user_id for record in tournament.joined_players}
    for result in request.results:
        if result.user_id not in roster_ids:
            raise HTTPException(status_code=400, detail=f"User {result.user_id} is not on the roster")

    for result in request.results:
        await get_db().tournaments.update_one(
            {"_id": tournament_id, "joined_players.user_id": result.user_id},
            {"$set": {
                "joined_players.$.kills": result.kills,
                "joined_players.$.rank": result.rank,
            }},
        )
    return await get_tournament_or_404(tournament_id)


async def delete_tournament(tournament_id: str):
    result = await get_db().tournaments.delete_one({"_id": tournament_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="No corresponding tournament found")
    logger.info("Deleted tournament %s", tournament_id)


async def append_player_record(tournament: Tournament, record: PlayerRecord) -> bool:
    """
    Push a roster record only if this user has no record yet and the roster
    still has room. Both checks are part of the update filter, so two
    concurrent joins can never both take the last slot.
    """
    result = await get_db().tournaments.update_one(
        {
            "_id": tournament.id,
            "joined_players.user_id": {"$ne": record.user_id},
            f"joined_players.{tournament.max_players - 1}": {"$exists": False},
        },
        {"$push": {"joined_players": record.model_dump(mode="json")}},
    )
    return result.modified_count == 1


async def join_tournament(tournament: Tournament, user: UserInDB, form: JoinForm) -> Tournament:
    if derive_status(tournament.start_time, tournament.status) == MatchStatus.finished:
        raise HTTPException(status_code=400, detail="Tournament is closed")

    # Raises JoinRejected before anything is written
    form = validate_join(form, user.balance, tournament.base_entry_fee)

    if any(record.user_id == user.id for record in tournament.joined_players):
        raise HTTPException(status_code=400, detail="Already joined tournament")
    if len(tournament.joined_players) >= tournament.max_players:
        raise HTTPException(status_code=400, detail="Tournament is full")

    if await debit_balance(user.id, form.fee) is None:
        logger.warning("Join of %s by %s refused: balance below %s", tournament.id, user.id, form.fee)
        raise HTTPException(status_code=400, detail="Insufficient balance")

    record = PlayerRecord(user_id=user.id, names=[name.strip() for name in form.names],
                          participation_type=form.match_type)
    if not await append_player_record(tournament, record):
        await credit_balance(user.id, form.fee)
        logger.warning("Join of %s by %s lost the roster race, refunded %s", tournament.id, user.id, form.fee)
        raise HTTPException(status_code=400, detail="Cannot join tournament")

    form = mark_submitted(form)
    logger.info("User %s joined %s as %s for %s, form %s",
                user.id, tournament.id, form.match_type.value, form.fee, form.stage.value)
    return await get_tournament_or_404(tournament.id)
