"""
Shared prediction store

One aggregate (teams, games, bets, global bets) guarded by a single
asyncio.Lock. All access, reads included, happens inside
``async with store.session() as s``. When the block exits (normally, by
exception or by cancellation) the full aggregate is written to the snapshot
file before the lock is released.
"""
import asyncio
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional

from tippy.core.timegate import Clock, is_open, parse_start_time, resolve_zone, utc_now
from tippy.errors import (
    BettingClosedError,
    DuplicateKeyError,
    PersistenceError,
    UnknownGameError,
    UnknownGlobalBetError,
    UnknownTeamError,
)
from tippy.models import Bet, Game, GameResult, GlobalBet, StoreData, Team


logger = logging.getLogger(__name__)


def load_snapshot(data_path: Optional[str]) -> StoreData:
    """
    Read the aggregate from disk

    Never fails: a missing, unreadable or unparsable file yields an empty
    aggregate so the process can still start.
    """
    if not data_path:
        logger.info("No data path configured, running in memory only")
        return StoreData()

    path = Path(data_path)
    if not path.exists():
        logger.info(f"Snapshot {data_path} does not exist yet, starting empty")
        return StoreData()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = StoreData.model_validate_json(f.read())
    except (OSError, ValueError) as e:
        logger.error(f"❌ Could not load snapshot {data_path}, starting empty: {e}")
        return StoreData()

    logger.info(
        f"✅ Loaded snapshot {data_path}: {len(data.teams)} teams, "
        f"{len(data.games)} games, {len(data.global_bets)} global bets"
    )
    return data


def write_snapshot(data: StoreData, data_path: str) -> None:
    """Atomically replace data_path with the serialized aggregate"""
    path = Path(data_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(data.model_dump_json(indent=2))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class StoreSession:
    """
    Exclusive view of the aggregate, valid only inside Store.session()

    Write operations validate everything before touching state, so a raised
    StoreError means nothing changed.
    """

    def __init__(self, data: StoreData, tz: str, clock: Clock):
        self._aggregate = data
        self._tz = tz
        self._clock = clock
        self._active = True
        self.dirty = False

    @property
    def _data(self) -> StoreData:
        # Every operation goes through here, so a closed session cannot
        # touch the aggregate without holding the lock
        if not self._active:
            raise RuntimeError("session closed")
        return self._aggregate

    def close(self) -> None:
        self._active = False

    # ==================== LOOKUPS ====================

    def _find_team(self, iso: str) -> Optional[Team]:
        return next((t for t in self._data.teams if t.iso == iso), None)

    def _find_game(self, short: str) -> Optional[Game]:
        return next((g for g in self._data.games if g.short == short), None)

    def _require_team(self, iso: str) -> Team:
        team = self._find_team(iso)
        if team is None:
            raise UnknownTeamError(f"Team '{iso}' not found")
        return team

    def _require_game(self, short: str) -> Game:
        game = self._find_game(short)
        if game is None:
            raise UnknownGameError(f"Game '{short}' not found")
        return game

    def _require_global_bet(self, short: str) -> GlobalBet:
        global_bet = self._data.global_bets.get(short)
        if global_bet is None:
            raise UnknownGlobalBetError(f"Global bet '{short}' not found")
        return global_bet

    # ==================== TEAMS ====================

    def add_team(self, team: Team) -> Team:
        if self._find_team(team.iso) is not None:
            raise DuplicateKeyError(f"Team '{team.iso}' already exists")
        self._data.teams.append(team.model_copy())
        self.dirty = True
        logger.info(f"Team added: {team.name} ({team.iso})")
        return team.model_copy()

    def list_teams(self) -> List[Team]:
        """Teams in insertion order"""
        return [t.model_copy() for t in self._data.teams]

    # ==================== GAMES ====================

    def add_game(
        self,
        name: str,
        short: str,
        team1_iso: str,
        team2_iso: str,
        start_time: str
    ) -> Game:
        """
        Create a game with no result

        Args:
            start_time: Kick-off as "YYYY MM DD HH:MM" in the store's zone

        Raises:
            UnknownTeamError: If either team iso is unknown
            InvalidTimestampError: If start_time cannot be parsed
            DuplicateKeyError: If short is already used
        """
        self._require_team(team1_iso)
        self._require_team(team2_iso)
        kickoff = parse_start_time(start_time, self._tz)
        if self._find_game(short) is not None:
            raise DuplicateKeyError(f"Game '{short}' already exists")

        game = Game(
            name=name,
            short=short,
            team1_iso=team1_iso,
            team2_iso=team2_iso,
            start_time=kickoff,
        )
        self._data.games.append(game)
        self.dirty = True
        logger.info(f"Game added: {name} ({short}) {team1_iso} vs {team2_iso} at {kickoff.isoformat()}")
        return game.model_copy(deep=True)

    def get_game(self, short: str) -> Game:
        return self._require_game(short).model_copy(deep=True)

    def list_games(self, open_only: bool = False) -> List[Game]:
        """Games by start time; open_only keeps those still accepting bets"""
        games = sorted(self._data.games, key=lambda g: g.start_time)
        if open_only:
            games = [g for g in games if is_open(g.start_time, self._clock)]
        return [g.model_copy(deep=True) for g in games]

    def set_result(self, game_short: str, team1_score: int, team2_score: int, note: str = "") -> Game:
        """Record the final score; always allowed, last write wins"""
        game = self._require_game(game_short)
        game.result = GameResult(team1_score=team1_score, team2_score=team2_score, note=note)
        self.dirty = True
        logger.info(f"Result for {game_short}: {team1_score}:{team2_score} {note}".rstrip())
        return game.model_copy(deep=True)

    # ==================== BETS ====================

    def upsert_bet(self, game_short: str, user: str, team1_score: int, team2_score: int) -> Bet:
        """
        Place or replace a user's bet on a game

        Raises:
            UnknownGameError: If the game does not exist
            BettingClosedError: If the game has already started
        """
        game = self._require_game(game_short)
        if not is_open(game.start_time, self._clock):
            logger.info(f"Bet by {user} on {game_short} rejected, game already started")
            raise BettingClosedError(f"Betting on '{game_short}' is closed")

        new_bet = Bet(user=user, team1_score=team1_score, team2_score=team2_score)
        bets = self._data.bets.setdefault(game_short, [])
        for idx, existing in enumerate(bets):
            if existing.user == user:
                bets[idx] = new_bet
                break
        else:
            bets.append(new_bet)

        self.dirty = True
        logger.info(f"Bet saved: {user} on {game_short} {team1_score}:{team2_score}")
        return new_bet.model_copy()

    def list_user_bets(self, user: str) -> Dict[str, Bet]:
        """A user's game bets keyed by game short, in game order"""
        result = {}
        for game in sorted(self._data.games, key=lambda g: g.start_time):
            for bet in self._data.bets.get(game.short, []):
                if bet.user == user:
                    result[game.short] = bet.model_copy()
        return result

    # ==================== GLOBAL BETS ====================

    def add_global_bet(self, name: str, short: str, points: int, start_time: str) -> GlobalBet:
        kickoff = parse_start_time(start_time, self._tz)
        if short in self._data.global_bets:
            raise DuplicateKeyError(f"Global bet '{short}' already exists")

        global_bet = GlobalBet(name=name, short=short, points=points, start_time=kickoff)
        self._data.global_bets[short] = global_bet
        self.dirty = True
        logger.info(f"Global bet added: {name} ({short}) worth {points} points")
        return global_bet.model_copy(deep=True)

    def get_global_bet(self, short: str) -> GlobalBet:
        return self._require_global_bet(short).model_copy(deep=True)

    def list_global_bets(self, open_only: bool = False) -> List[GlobalBet]:
        global_bets = sorted(self._data.global_bets.values(), key=lambda gb: gb.start_time)
        if open_only:
            global_bets = [gb for gb in global_bets if is_open(gb.start_time, self._clock)]
        return [gb.model_copy(deep=True) for gb in global_bets]

    def upsert_global_bet_prediction(self, global_short: str, user: str, team_iso: str) -> GlobalBet:
        global_bet = self._require_global_bet(global_short)
        self._require_team(team_iso)
        if not is_open(global_bet.start_time, self._clock):
            logger.info(f"Prediction by {user} on {global_short} rejected, already started")
            raise BettingClosedError(f"Betting on '{global_short}' is closed")

        global_bet.bets[user] = team_iso
        self.dirty = True
        logger.info(f"Prediction saved: {user} on {global_short} -> {team_iso}")
        return global_bet.model_copy(deep=True)

    def set_global_bet_result(self, global_short: str, team_iso: str) -> GlobalBet:
        global_bet = self._require_global_bet(global_short)
        self._require_team(team_iso)
        global_bet.result = team_iso
        self.dirty = True
        logger.info(f"Result for global bet {global_short}: {team_iso}")
        return global_bet.model_copy(deep=True)

    def list_user_global_bets(self, user: str) -> Dict[str, str]:
        """global short -> team iso chosen by user"""
        return {
            short: gb.bets[user]
            for short, gb in self._data.global_bets.items()
            if user in gb.bets
        }

    # ==================== SNAPSHOT ====================

    def snapshot(self) -> StoreData:
        """Deep copy of the aggregate, safe to use after the session ends"""
        return self._data.model_copy(deep=True)


class Store:
    """
    Owner of the aggregate

    Created once at startup and handed to every consumer. Only one session
    is live at a time; waiters are served in arrival order.
    """

    def __init__(
        self,
        data: Optional[StoreData] = None,
        data_path: Optional[str] = None,
        tz: str = "UTC",
        clock: Optional[Clock] = None
    ):
        resolve_zone(tz)
        self._data = data if data is not None else StoreData()
        self.data_path = data_path
        self.tz = tz
        self._clock = clock or utc_now
        self._lock = asyncio.Lock()

    @classmethod
    def load(cls, data_path: Optional[str] = None, tz: str = "UTC", clock: Optional[Clock] = None) -> "Store":
        """Build a store from the snapshot at data_path (empty on any failure)"""
        return cls(load_snapshot(data_path), data_path=data_path, tz=tz, clock=clock)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[StoreSession]:
        """
        Acquire exclusive access to the aggregate

        The snapshot is flushed on every exit path before the lock is
        released. Mutations applied before an exception stay applied.

        Raises:
            PersistenceError: If the snapshot could not be written
        """
        async with self._lock:
            session = StoreSession(self._data, self.tz, self._clock)
            try:
                yield session
            finally:
                session.close()
                self._flush(session.dirty)

    def _flush(self, dirty: bool) -> None:
        if not self.data_path:
            return
        try:
            write_snapshot(self._data, self.data_path)
        except OSError as e:
            logger.critical(
                f"🔥 Failed to write snapshot {self.data_path}, in-memory state is ahead of disk: {e}",
                exc_info=True
            )
            raise PersistenceError(f"Failed to write snapshot {self.data_path}: {e}") from e
        logger.debug(f"Snapshot written to {self.data_path} (dirty={dirty})")
