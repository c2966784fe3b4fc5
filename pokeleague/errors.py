"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class AuthorizationError(AppError):
    """Raised when a user writes to data they do not own."""

    def __init__(self, message="You are not allowed to perform this action."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class MatchStateError(AppError):
    """Raised when a match can no longer be changed."""

    def __init__(self, message="This match can no longer be changed."):
        """Initialize the error."""
        super().__init__(message, 409)


class ConsensusError(AppError):
    """Raised when both participants have not agreed on a result."""

    def __init__(self, message="Both players must submit matching results."):
        """Initialize the error."""
        super().__init__(message, 409)


class IncompleteEvidenceError(ConsensusError):
    """Raised when a completion is attempted before both slots are filled."""

    def __init__(
        self,
        message="Both players must upload a screenshot, damage points and a winner.",
    ):
        """Initialize the error."""
        super().__init__(message)


class WinnerMismatchError(ConsensusError):
    """Raised when both players picked a different winner."""

    def __init__(self, player1_selection=None, player2_selection=None):
        """Initialize the error."""
        super().__init__(
            "Players selected different winners. "
            "One of you must correct your submission before the match can complete."
        )
        self.player1_selection = player1_selection
        self.player2_selection = player2_selection


class PersistenceError(AppError):
    """Raised when a store operation fails."""

    def __init__(self, message="A database error occurred. Please try again later."):
        """Initialize the error."""
        super().__init__(message, 500)
