"""Game rules package for RackKeeper."""

from .eightball import EightBallGame
from .nineball import BallState, NineBallGame, NineBallRack

__all__ = ["EightBallGame", "NineBallGame", "NineBallRack", "BallState"]
