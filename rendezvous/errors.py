"""
Domain error taxonomy.

Every failure surfaced to a caller carries a stable machine-readable ``kind``
(the taxonomy bucket), a finer ``code`` and a human-readable message. The
exception handler in main.py renders them as::

    {"error": {"kind": "invalid_state", "code": "already_liked", "message": "..."}}
"""


class DomainError(Exception):
    kind = "domain_error"
    code = "domain_error"
    status_code = 400
    default_message = "Request could not be completed"

    def __init__(
        self,
        message: str | None = None,
        details: dict | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message or self.default_message
        self.details = details
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> dict:
        error = {"kind": self.kind, "code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return error


class InvalidReference(DomainError):
    kind = "invalid_reference"
    code = "invalid_reference"
    default_message = "Invalid identifier"


class InvalidTarget(InvalidReference):
    code = "invalid_target"
    status_code = 404
    default_message = "User not found"


class SelfReference(DomainError):
    kind = "self_reference"
    code = "self_reference"
    default_message = "You cannot target yourself"


class InvalidState(DomainError):
    kind = "invalid_state"
    code = "invalid_state"
    status_code = 409
    default_message = "Operation not allowed in the current state"


class AlreadyLiked(InvalidState):
    code = "already_liked"
    default_message = "You have already liked this user"


class NotLiked(InvalidState):
    code = "not_liked"
    default_message = "You have not liked this user"


class NotMatched(InvalidState):
    code = "not_matched"
    default_message = "You can only schedule a date with a match"


class DuplicateConfirmation(InvalidState):
    code = "duplicate_confirmation"
    default_message = "This date has already been confirmed"


class NotFound(DomainError):
    kind = "not_found"
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class ConfigurationMissing(DomainError):
    kind = "configuration_missing"
    code = "configuration_missing"
    status_code = 500
    default_message = "Server configuration is missing"


class InternalInconsistency(DomainError):
    kind = "internal_inconsistency"
    code = "internal_inconsistency"
    status_code = 500
    default_message = "The operation could not be applied consistently, please retry"


class Unauthenticated(DomainError):
    kind = "unauthenticated"
    code = "unauthenticated"
    status_code = 401
    default_message = "Not authenticated. Please provide a valid Bearer token in the Authorization header."


class TokenExpired(Unauthenticated):
    code = "token_expired"
    default_message = "Token has expired. Please refresh your session."


class RateLimited(DomainError):
    kind = "rate_limited"
    code = "rate_limited"
    status_code = 429
    default_message = "Rate limit exceeded"


class ServiceUnavailable(DomainError):
    kind = "service_unavailable"
    code = "service_unavailable"
    status_code = 503
    default_message = "Service temporarily unavailable"
