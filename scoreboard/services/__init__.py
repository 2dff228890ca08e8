"""Service layer: ranking engine, score store and challenge rotation."""

from . import challenges, ranking, scores, seed, tracks

__all__ = ["challenges", "ranking", "scores", "seed", "tracks"]
