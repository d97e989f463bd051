"""Error taxonomy shared by services and the HTTP layer.

Every error carries a human-readable message and the HTTP status it maps to.
Operational errors are expected outcomes (bad input, failed auth) and are
logged at info level; anything else is logged with its traceback.
"""


class ApiError(Exception):
    """Base class for errors that are rendered as a {success: false, message} envelope."""

    status_code: int = 500
    kind: str = "Internal"
    is_operational: bool = True

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class UnauthenticatedError(ApiError):
    """Missing, invalid or unusable credential."""

    status_code = 401
    kind = "Unauthenticated"


class MalformedCredentialError(ApiError):
    """Credential present but syntactically invalid."""

    status_code = 400
    kind = "MalformedCredential"


class ForbiddenError(ApiError):
    """Authenticated but not allowed (role or ownership)."""

    status_code = 403
    kind = "Forbidden"


class MissingArgumentError(ApiError):
    status_code = 400
    kind = "MissingArgument"


class InvalidArgumentError(ApiError):
    status_code = 400
    kind = "InvalidArgument"


class ConflictError(ApiError):
    """Uniqueness violation (username, email, token)."""

    status_code = 409
    kind = "Conflict"


class AdminAlreadyExistsError(ConflictError):
    """First-admin setup attempted after an admin exists. Answered with 403."""

    status_code = 403


class NotFoundError(ApiError):
    status_code = 404
    kind = "NotFound"


class UpstreamError(ApiError):
    """Banking service failed or is unreachable (502 or 503)."""

    status_code = 502
    kind = "Upstream"


class InternalError(ApiError):
    """Unexpected failure (e.g. the store is unavailable). Message is safe to show."""

    status_code = 500
    kind = "Internal"
    is_operational = False
