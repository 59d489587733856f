"""
Data models for the prediction store
"""
from typing import Dict, List, Optional

from pydantic import AwareDatetime, BaseModel, Field


class Team(BaseModel):
    """A team that games and global bets refer to by iso code"""
    name: str
    iso: str                  # unique identity
    flag: str = ""            # display string, usually an emoji


class GameResult(BaseModel):
    """Final score of a game"""
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)
    note: str = ""


class Game(BaseModel):
    """A scheduled game between two teams"""
    name: str
    short: str                # unique identity
    team1_iso: str
    team2_iso: str
    start_time: AwareDatetime
    result: Optional[GameResult] = None


class Bet(BaseModel):
    """One user's score prediction for a game"""
    user: str
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)


class GlobalBet(BaseModel):
    """Longer-horizon wager on which team wins an outcome"""
    name: str
    short: str
    points: int
    start_time: AwareDatetime
    result: Optional[str] = None            # winning team iso
    bets: Dict[str, str] = {}               # user -> team iso


class StoreData(BaseModel):
    """The aggregate owned by the store; also the snapshot schema"""
    teams: List[Team] = []
    games: List[Game] = []
    bets: Dict[str, List[Bet]] = {}         # game short -> bets
    global_bets: Dict[str, GlobalBet] = {}  # global short -> global bet


class ScoringParams(BaseModel):
    """Points awarded per game bet tier"""
    points_exact: int = 3          # exact score
    points_differential: int = 2   # same goal difference
    points_direction: int = 1      # same winning side


class Settings(BaseModel):
    """
    Application configuration

    data_path: snapshot file, None keeps everything in memory
    timezone: reference zone for "YYYY MM DD HH:MM" input
    """
    data_path: Optional[str] = None
    timezone: str = "UTC"
    log_level: str = "INFO"
    scoring: ScoringParams = ScoringParams()


# ==================== REQUEST BODIES ====================

class GameCreate(BaseModel):
    name: str
    short: str
    team1_iso: str
    team2_iso: str
    start_time: str  # "YYYY MM DD HH:MM"


class GlobalBetCreate(BaseModel):
    name: str
    short: str
    points: int
    start_time: str  # "YYYY MM DD HH:MM"


class ResultSubmission(BaseModel):
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)
    note: str = ""


class BetSubmission(BaseModel):
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)


class TeamChoice(BaseModel):
    team_iso: str
