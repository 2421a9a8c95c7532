class MatchValidationError(ValueError):
    pass


class InvalidTeamError(MatchValidationError):
    pass


class InvalidMatchStateError(MatchValidationError):
    pass


class MatchFinishedError(MatchValidationError):
    pass


class SnapshotError(TypeError):
    pass
