"""Registry error types."""


class AuthorizationError(PermissionError):
    """Raised when a caller lacks the role an operation requires."""

    def __init__(self, caller: str, role: str = "rater"):
        self.caller = caller
        self.role = role
        super().__init__(f"{caller} does not hold the {role} role")
