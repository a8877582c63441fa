"""Read-only projections rendered by the client."""
from typing import Iterable, List, Optional

from models.tournament import MatchStatus, TeamEntry, Tournament, TournamentCard
from models.user import Role, UserInDB
from services.rules import derive_status, now_ms

NAVIGATION_TABS = [
    {"id": "home", "label": "Home", "admin_only": False},
    {"id": "my-matches", "label": "My Matches", "admin_only": False},
    {"id": "wallet", "label": "Wallet", "admin_only": False},
    {"id": "support", "label": "Support", "admin_only": False},
    {"id": "admin", "label": "Admin", "admin_only": True},
]


def find_player_record(tournament: Tournament, user_id: Optional[str]):
    return next((record for record in tournament.joined_players if record.user_id == user_id), None)


def join_state(tournament: Tournament, status: MatchStatus, is_joined: bool) -> str:
    if is_joined:
        return "joined"
    if status == MatchStatus.finished:
        return "closed"
    if len(tournament.joined_players) >= tournament.max_players:
        return "full"
    return "open"


def tournament_card(tournament: Tournament, user: Optional[UserInDB], now: Optional[int] = None) -> TournamentCard:
    status = derive_status(tournament.start_time, tournament.status, now)
    record = find_player_record(tournament, user.id if user else None)
    is_joined = record is not None
    # Room details only go to teams on the roster while the match is live
    show_room = is_joined and status == MatchStatus.live
    return TournamentCard(
        id=tournament.id,
        title=tournament.title,
        match_type=tournament.match_type,
        base_entry_fee=tournament.base_entry_fee,
        per_kill=tournament.per_kill,
        prize1=tournament.prize1,
        prize2=tournament.prize2,
        prize3=tournament.prize3,
        start_time=tournament.start_time,
        max_players=tournament.max_players,
        map=tournament.map,
        derived_status=status,
        players_joined=len(tournament.joined_players),
        is_joined=is_joined,
        my_participation_type=record.participation_type if record else None,
        join_state=join_state(tournament, status, is_joined),
        room_id=tournament.room_id if show_room else None,
        room_pass=tournament.room_pass if show_room else None,
    )


def active_cards(tournaments: Iterable[Tournament], user: Optional[UserInDB], now: Optional[int] = None) -> List[TournamentCard]:
    if now is None:
        now = now_ms()
    cards = [tournament_card(tournament, user, now) for tournament in tournaments]
    cards = [card for card in cards if card.derived_status != MatchStatus.finished]
    return sorted(cards, key=lambda card: card.start_time)


def joined_cards(tournaments: Iterable[Tournament], user: UserInDB, now: Optional[int] = None) -> List[TournamentCard]:
    if now is None:
        now = now_ms()
    cards = [tournament_card(tournament, user, now) for tournament in tournaments
             if find_player_record(tournament, user.id)]
    return sorted(cards, key=lambda card: card.start_time, reverse=True)


def player_list(tournament: Tournament) -> List[TeamEntry]:
    return [
        TeamEntry(team=index + 1, participation_type=record.participation_type, names=record.names,
                  kills=record.kills, rank=record.rank)
        for index, record in enumerate(tournament.joined_players)
    ]


def navigation(user: UserInDB):
    return [tab for tab in NAVIGATION_TABS if not tab["admin_only"] or user.role == Role.admin]
