"""Leaderboard ranking, medal assignment and cross-track aggregation.

Everything in this module is a pure function over rows that were already
fetched from the store. Positions and medals are derived on every read and
are never written back, so computing the same leaderboard twice without an
intervening submission always yields the same result.
"""

from __future__ import annotations

import re
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..core.time import isoformat, utcnow
from ..models import WEEKLY_CHALLENGE, Score

MEDAL_AUTHOR = "Author"
MEDAL_GOLD = "Gold"
MEDAL_SILVER = "Silver"
MEDAL_BRONZE = "Bronze"
MEDAL_NONE = "None"

# Best first; index doubles as a comparable rank.
MEDAL_ORDER = (MEDAL_AUTHOR, MEDAL_GOLD, MEDAL_SILVER, MEDAL_BRONZE, MEDAL_NONE)

CAMPAIGN_POINTS = {1: 10, 2: 7, 3: 5, 4: 3, 5: 1}
CAMPAIGN_TRACK_IDS = tuple(str(number) for number in range(1, 26))

GLOBAL_TOP = 10
CAMPAIGN_TOP = 20
PERSONAL_BESTS = 5

_WEEKLY_TRACK_RE = re.compile(r"^w\d+-\d+$")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def medal_for_time(time: int, thresholds: Any) -> str:
    """Return the best medal whose threshold ``time`` meets.

    ``thresholds`` is anything with ``author_time``/``gold_time``/
    ``silver_time``/``bronze_time`` attributes. An unset threshold cannot be
    attained and is skipped.
    """

    tiers = (
        (MEDAL_AUTHOR, getattr(thresholds, "author_time", None)),
        (MEDAL_GOLD, getattr(thresholds, "gold_time", None)),
        (MEDAL_SILVER, getattr(thresholds, "silver_time", None)),
        (MEDAL_BRONZE, getattr(thresholds, "bronze_time", None)),
    )
    for medal, limit in tiers:
        if limit is not None and time <= limit:
            return medal
    return MEDAL_NONE


def is_weekly_track(track_id: str) -> bool:
    return track_id == WEEKLY_CHALLENGE or bool(_WEEKLY_TRACK_RE.match(track_id))


def _created_key(value: Optional[datetime]) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _sort_key(score: Score):
    return (score.time, _created_key(score.created_at), score.id or 0)


def sort_scores(scores: Iterable[Score]) -> List[Score]:
    """Fastest first; equal times keep the earlier submission ahead."""

    return sorted(scores, key=_sort_key)


def group_by_track(scores: Iterable[Score]) -> Dict[str, List[Score]]:
    """Group sorted rows by track id, preserving first-seen track order."""

    groups: Dict[str, List[Score]] = {}
    for score in sort_scores(scores):
        groups.setdefault(score.track_id, []).append(score)
    return groups


def score_to_dict(
    score: Score, position: Optional[int] = None, medal: Optional[str] = None
) -> Dict[str, Any]:
    """Serialise a score row plus its derived position and medal."""

    return {
        "id": str(score.id) if score.id is not None else None,
        "trackId": score.track_id,
        "userId": str(score.user_id),
        "username": score.username,
        "email": score.email,
        "time": score.time,
        "position": position,
        "medal": medal,
        "isPersonalBest": score.is_personal_best,
        "screenshot": score.screenshot or "",
        "replay": score.replay or "",
        "createdAt": isoformat(score.created_at),
        "updatedAt": isoformat(score.updated_at),
    }


def rank_track(thresholds: Any, scores: Iterable[Score]) -> List[Dict[str, Any]]:
    """Rank one track's rows: contiguous positions 1..N and a medal each."""

    return [
        score_to_dict(score, position, medal_for_time(score.time, thresholds))
        for position, score in enumerate(sort_scores(scores), start=1)
    ]


def build_track_leaderboard(
    track_id: str, track: Dict[str, Any], thresholds: Any, scores: Sequence[Score]
) -> Dict[str, Any]:
    """Leaderboard payload for ``track_id`` (which may be a virtual id)."""

    ranked = rank_track(thresholds, scores)
    return {
        "trackId": track_id,
        "track": track,
        "scores": ranked,
        "totalPlayers": len(ranked),
        "lastUpdated": isoformat(utcnow()),
    }


def _track_name(track_names: Mapping[str, str], track_id: str) -> str:
    return track_names.get(track_id) or f"Track {track_id}"


def global_rankings(
    scores: Sequence[Score], track_names: Mapping[str, str]
) -> Dict[str, Any]:
    """Cross-track rankings: first places, weekly wins and activity."""

    groups = group_by_track(scores)

    first_place_wins: Dict[str, int] = defaultdict(int)
    weekly_wins: Dict[str, int] = defaultdict(int)
    total_times: Dict[str, int] = defaultdict(int)
    best_times: Dict[str, List[Dict[str, Any]]] = defaultdict(list)

    for track_id, group in groups.items():
        winner = group[0].username
        first_place_wins[winner] += 1
        if is_weekly_track(track_id):
            weekly_wins[winner] += 1

        track_name = _track_name(track_names, track_id)
        for score in group:
            total_times[score.username] += 1
            best_times[score.username].append(
                {"trackId": track_id, "time": score.time, "trackName": track_name}
            )

    rankings = sorted(
        (
            {
                "username": username,
                "firstPlaceWins": wins,
                "weeklyWins": weekly_wins.get(username, 0),
                "totalTimes": total_times.get(username, 0),
                "personalBests": sorted(
                    best_times.get(username, []), key=lambda item: item["time"]
                )[:PERSONAL_BESTS],
            }
            for username, wins in first_place_wins.items()
        ),
        key=lambda entry: (-entry["firstPlaceWins"], entry["username"]),
    )

    weekly_champions = sorted(
        (
            {
                "username": username,
                "weeklyWins": wins,
                "firstPlaceWins": first_place_wins.get(username, 0),
                "totalTimes": total_times.get(username, 0),
            }
            for username, wins in weekly_wins.items()
        ),
        key=lambda entry: (-entry["weeklyWins"], entry["username"]),
    )

    most_active = sorted(
        (
            {
                "username": username,
                "totalTimes": count,
                "firstPlaceWins": first_place_wins.get(username, 0),
                "weeklyWins": weekly_wins.get(username, 0),
            }
            for username, count in total_times.items()
        ),
        key=lambda entry: (-entry["totalTimes"], entry["username"]),
    )

    return {
        "globalRankings": rankings[:GLOBAL_TOP],
        "weeklyChampions": weekly_champions[:GLOBAL_TOP],
        "mostActive": most_active[:GLOBAL_TOP],
        "stats": {
            "totalPlayers": len(set(first_place_wins) | set(total_times)),
            "totalTracks": len(groups),
            "totalScores": len(scores),
            "lastUpdated": isoformat(utcnow()),
        },
    }


def campaign_rankings(
    scores: Sequence[Score],
    track_names: Mapping[str, str],
    campaign_track_ids: Iterable[str] = CAMPAIGN_TRACK_IDS,
) -> Dict[str, Any]:
    """Point table over the campaign tracks: 10/7/5/3/1 for the top five."""

    campaign_ids = set(campaign_track_ids)
    campaign_scores = [score for score in scores if score.track_id in campaign_ids]
    groups = group_by_track(campaign_scores)

    points: Dict[str, int] = defaultdict(int)
    placings: Dict[str, Dict[int, int]] = defaultdict(lambda: {1: 0, 2: 0, 3: 0})
    total_times: Dict[str, int] = defaultdict(int)
    tracks_played: Dict[str, set] = defaultdict(set)
    best_times: Dict[str, List[Dict[str, Any]]] = defaultdict(list)

    for track_id, group in groups.items():
        track_name = _track_name(track_names, track_id)
        for position, score in enumerate(group, start=1):
            username = score.username
            if position in CAMPAIGN_POINTS:
                points[username] += CAMPAIGN_POINTS[position]
                if position <= 3:
                    placings[username][position] += 1
            total_times[username] += 1
            tracks_played[username].add(track_id)
            best_times[username].append(
                {
                    "trackId": track_id,
                    "time": score.time,
                    "trackName": track_name,
                    "position": position,
                }
            )

    rankings = []
    for username, count in total_times.items():
        finishes = placings[username]
        rankings.append(
            {
                "username": username,
                "points": points.get(username, 0),
                "firstPlaceWins": finishes[1],
                "secondPlaceWins": finishes[2],
                "thirdPlaceWins": finishes[3],
                "totalTracks": len(tracks_played[username]),
                "totalTimes": count,
                "bestTimes": sorted(
                    best_times[username], key=lambda item: item["time"]
                )[:PERSONAL_BESTS],
            }
        )
    rankings.sort(key=lambda entry: (-entry["points"], entry["username"]))

    return {
        "campaignRankings": rankings[:CAMPAIGN_TOP],
        "pointsTable": {str(position): value for position, value in CAMPAIGN_POINTS.items()},
        "stats": {
            "totalPlayers": len(total_times),
            "totalTracks": len(groups),
            "totalScores": len(campaign_scores),
            "lastUpdated": isoformat(utcnow()),
        },
    }


def player_stats(
    user_id: int,
    scores: Sequence[Score],
    thresholds_by_track: Mapping[str, Any],
    campaign_track_ids: Iterable[str] = CAMPAIGN_TRACK_IDS,
) -> Dict[str, Any]:
    """Per-player summary derived from every track leaderboard they appear on."""

    campaign_ids = set(campaign_track_ids)
    medals = {medal.lower(): 0 for medal in MEDAL_ORDER[:-1]}
    positions: List[int] = []
    first_places = 0
    weekly_wins = 0
    campaign_played = set()

    for track_id, group in group_by_track(scores).items():
        for position, score in enumerate(group, start=1):
            if score.user_id != user_id:
                continue
            positions.append(position)
            thresholds = thresholds_by_track.get(track_id)
            medal = medal_for_time(score.time, thresholds)
            if medal != MEDAL_NONE:
                medals[medal.lower()] += 1
            if position == 1:
                first_places += 1
                if is_weekly_track(track_id):
                    weekly_wins += 1
            if track_id in campaign_ids:
                campaign_played.add(track_id)

    return {
        "userId": str(user_id),
        "totalRaces": len(positions),
        "personalBests": len(positions),
        "averagePosition": round(sum(positions) / len(positions), 2) if positions else None,
        "bestPosition": min(positions) if positions else None,
        "firstPlaceFinishes": first_places,
        "weeklyWins": weekly_wins,
        "medals": medals,
        "campaignProgress": (
            round(len(campaign_played) * 100 / len(campaign_ids)) if campaign_ids else 0
        ),
    }


__all__ = [
    "CAMPAIGN_POINTS",
    "CAMPAIGN_TRACK_IDS",
    "MEDAL_ORDER",
    "build_track_leaderboard",
    "campaign_rankings",
    "global_rankings",
    "group_by_track",
    "is_weekly_track",
    "medal_for_time",
    "player_stats",
    "rank_track",
    "score_to_dict",
    "sort_scores",
]
