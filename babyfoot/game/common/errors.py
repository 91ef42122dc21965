from babyfoot.core.errors import ConflictError


class InvalidFormatError(ConflictError):
    code = "E_INVALID_FORMAT"


class InvalidTeamAssignmentError(ConflictError):
    code = "E_INVALID_TEAM_ASSIGNMENT"


class PinCodeExhaustedError(ConflictError):
    code = "E_PIN_CODE_EXHAUSTED"


class InvalidTargetScoreError(ConflictError):
    code = "E_INVALID_TARGET_SCORE"
