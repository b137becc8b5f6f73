"""Error taxonomy shared by the stores, the token codec and the HTTP layer.

Every error carries the HTTP status it maps to and the message that is safe
to show a client. The exception's own ``str()`` may hold diagnostic detail
and is only ever logged.
"""


class TaskFlowError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, detail=None):
        self.detail = detail or self.public_message
        super().__init__(self.detail)


class ValidationError(TaskFlowError):
    """Bad input shape, length or enum value. The client can fix and retry."""

    status_code = 400
    public_message = "Validation error"

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class DuplicateEmail(TaskFlowError):
    status_code = 409
    public_message = "User already exists with this email"


class AuthError(TaskFlowError):
    """Base for every "not authenticated" outcome.

    Subclasses exist for diagnostics only; all of them share one public
    message so a client cannot tell which part of authentication failed.
    """

    status_code = 401
    public_message = "Not authenticated"


class InvalidCredentials(AuthError):
    # Same text for unknown email and wrong password.
    public_message = "Invalid email or password"


class AuthenticationRequired(AuthError):
    pass


class InvalidToken(AuthError):
    pass


class ExpiredToken(AuthError):
    pass


class NotFound(TaskFlowError):
    status_code = 404
    public_message = "Task not found"


class InternalError(TaskFlowError):
    pass


class ConfigError(Exception):
    """Required configuration is missing or malformed at startup."""
