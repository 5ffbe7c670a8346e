"""Domain errors raised by the scorekeeper."""


class ScorekeeperError(Exception):
    """Base class for every rejection the scorekeeper can signal."""


class InvalidSetupError(ScorekeeperError):
    """Match setup was rejected (empty or duplicate names, bad targets)."""


class IllegalTurnEndError(ScorekeeperError):
    """A turn cannot be ended with the table in its current state."""


class InvalidWinnerError(ScorekeeperError):
    """The winner id is not one of the two players in the match."""


class MatchNotActiveError(ScorekeeperError):
    """There is no match in progress to apply the operation to."""


class GameTypeError(ScorekeeperError):
    """The operation does not apply to the match's game type."""


class BallIndexError(ScorekeeperError):
    """A ball index outside the nine-ball rack was given."""
