"""
Service-layer error kinds.

Services raise these directly; routers let them propagate and the
handler installed by ``blogcore.main`` turns them into JSON responses.
Each class carries the HTTP status and the machine-readable ``code``
used in the error body.
"""


class ServiceError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
        self.message = message


class NotFound(ServiceError):
    status_code = 404
    code = "NOT_FOUND"


class AlreadyExists(ServiceError):
    status_code = 409
    code = "CONFLICT"


class Forbidden(ServiceError):
    status_code = 403
    code = "FORBIDDEN"


class Unauthorized(ServiceError):
    status_code = 401
    code = "UNAUTHORIZED"


class InternalFailure(ServiceError):
    """A persistence call failed; the store's own error is chained, not exposed."""
