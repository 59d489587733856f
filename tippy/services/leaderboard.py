"""
Leaderboard service - Assemble ranked leaderboard data
"""
from typing import Dict, List

from tippy.core.scoring import calculate_totals
from tippy.models import ScoringParams, StoreData


def build_leaderboard(totals: Dict[str, int]) -> List[dict]:
    """
    Rank users by points

    Returns:
        Sorted list by points (desc), then user (asc). Equal points share
        a rank, the next rank skips (1, 1, 3).
    """
    results = [{"user": user, "points": points} for user, points in totals.items()]
    results.sort(key=lambda x: (-x["points"], x["user"]))

    previous_points = None
    rank = 0
    for idx, result in enumerate(results):
        if result["points"] != previous_points:
            rank = idx + 1
            previous_points = result["points"]
        result["rank"] = rank

    return results


def get_leaderboard_data(data: StoreData, params: ScoringParams) -> Dict:
    """
    Score a snapshot and format it for display

    Args:
        data: Aggregate snapshot taken inside a store session
        params: Points per game bet tier

    Returns:
        Formatted leaderboard data
    """
    leaderboard = build_leaderboard(calculate_totals(data, params))

    return {
        "users": leaderboard,
        "total_users": len(leaderboard),
        "scored_games": sum(1 for g in data.games if g.result is not None),
        "scored_global_bets": sum(1 for gb in data.global_bets.values() if gb.result is not None),
    }
