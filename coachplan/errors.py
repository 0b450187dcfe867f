"""Error taxonomy shared by services and routes.

Services raise these; the app factory turns them into ``{"msg": ...}``
JSON responses with the matching status code.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {"msg": self.message}
        if self.details:
            body["errors"] = self.details
        return body


class ValidationError(ServiceError):
    """Malformed or inconsistent input (reorder id mismatch, bad group...)."""
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """Invariant violated by concurrent state, e.g. a second active session."""
    status_code = 409


class ForbiddenError(ServiceError):
    status_code = 403
