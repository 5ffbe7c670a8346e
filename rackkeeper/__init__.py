"""RackKeeper: pool match scorekeeper and league stats presentation."""

__version__ = "0.1.0"
