"""Request body schemas."""

from .auth import LoginIn, RegisterIn
from .score import ScoreSubmitIn
from .track import ChallengeAssignIn, TrackCreateIn

__all__ = [
    "ChallengeAssignIn",
    "LoginIn",
    "RegisterIn",
    "ScoreSubmitIn",
    "TrackCreateIn",
]
