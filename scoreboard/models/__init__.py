"""Database model exports."""

from .challenge import CAMPAIGN_CHALLENGE, CHALLENGE_SLOTS, WEEKLY_CHALLENGE, ChallengeSlot
from .score import Score
from .track import DIFFICULTIES, MAP_TYPES, Track
from .user import User

__all__ = [
    "CAMPAIGN_CHALLENGE",
    "CHALLENGE_SLOTS",
    "ChallengeSlot",
    "DIFFICULTIES",
    "MAP_TYPES",
    "Score",
    "Track",
    "User",
    "WEEKLY_CHALLENGE",
]
