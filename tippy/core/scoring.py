"""
Prediction Scoring Engine

Game bets, for a game with result (r1, r2) and bet (b1, b2):
  - b1 == r1 and b2 == r2                       → POINTS_EXACT
  - b1 - b2 == r1 - r2                          → POINTS_DIFFERENTIAL
  - same strict winner (b1 > b2 and r1 > r2,
    or b1 < b2 and r1 < r2)                     → POINTS_DIRECTION
  - otherwise                                   → 0

Rules:
  - A predicted draw only scores through the exact or differential tier
  - Games without a result contribute 0, but their bettors still appear
  - Global bets pay their configured points to every user who picked the
    winning team, nothing to anyone else
  - Totals are plain sums, independent of iteration order
"""
from typing import Dict, Tuple

from tippy.models import ScoringParams, StoreData


POINTS_EXACT = 3
POINTS_DIFFERENTIAL = 2
POINTS_DIRECTION = 1

DEFAULT_PARAMS = ScoringParams(
    points_exact=POINTS_EXACT,
    points_differential=POINTS_DIFFERENTIAL,
    points_direction=POINTS_DIRECTION,
)


def score_bet(
    bet: Tuple[int, int],
    result: Tuple[int, int],
    params: ScoringParams = DEFAULT_PARAMS
) -> int:
    """
    Points for a single game bet

    Args:
        bet: Predicted (team1, team2) goals
        result: Actual (team1, team2) goals
        params: Points per tier

    Returns:
        Points awarded for the highest matching tier

    Example:
        result (2, 1): bet (2, 1) → 3, bet (3, 2) → 2, bet (3, 0) → 1, bet (1, 1) → 0
    """
    b1, b2 = bet
    r1, r2 = result

    if b1 == r1 and b2 == r2:
        return params.points_exact

    if (b1 - b2) == (r1 - r2):
        return params.points_differential

    if (b1 > b2 and r1 > r2) or (b1 < b2 and r1 < r2):
        return params.points_direction

    return 0


def calculate_game_points(data: StoreData, params: ScoringParams = DEFAULT_PARAMS) -> Dict[str, int]:
    """Per-user points from game bets; pending games register bettors with 0"""
    totals: Dict[str, int] = {}

    for game in data.games:
        for bet in data.bets.get(game.short, []):
            points = 0
            if game.result is not None:
                points = score_bet(
                    (bet.team1_score, bet.team2_score),
                    (game.result.team1_score, game.result.team2_score),
                    params
                )
            totals[bet.user] = totals.get(bet.user, 0) + points

    return totals


def calculate_global_points(data: StoreData) -> Dict[str, int]:
    """Per-user points from global bets; exact team match only"""
    totals: Dict[str, int] = {}

    for global_bet in data.global_bets.values():
        for user, team_iso in global_bet.bets.items():
            points = 0
            if global_bet.result is not None and team_iso == global_bet.result:
                points = global_bet.points
            totals[user] = totals.get(user, 0) + points

    return totals


def calculate_totals(data: StoreData, params: ScoringParams = DEFAULT_PARAMS) -> Dict[str, int]:
    """
    Main scoring entry point

    Args:
        data: Read-only aggregate snapshot
        params: Points per game bet tier

    Returns:
        Mapping user → total points, containing every user with at least
        one game bet or global bet prediction
    """
    totals = calculate_game_points(data, params)

    for user, points in calculate_global_points(data).items():
        totals[user] = totals.get(user, 0) + points

    return totals
