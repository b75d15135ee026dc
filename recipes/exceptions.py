"""
Error taxonomy for RecipeShare.

Every failure the app knows how to handle is one of these. Views catch them at
the action that triggered them and turn them into a flash message (or a
dedicated page for RecipeNotFound); none of them bubble up to Django's 500
handler.
"""


class RecipeShareError(Exception):
    """Base class for application errors."""

    default_message = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(RecipeShareError):
    """An action needs a signed-in user and there is none. No remote call was made."""

    default_message = "Please sign in to continue."


class RemoteCallError(RecipeShareError):
    """Supabase returned an error (network, validation, permission)."""

    default_message = "The recipe service is unavailable right now."

    def __init__(self, message: str | None = None, *, table: str | None = None, operation: str | None = None):
        self.table = table
        self.operation = operation
        super().__init__(message)


class RecipeNotFound(RecipeShareError):
    default_message = "Recipe not found"


class StaleMount(RecipeShareError):
    """
    Results arrived for a detail mount that has since been superseded.
    ``state`` holds what the stale load fetched, for rendering without saving.
    """

    default_message = "A newer load of this page replaced this one."

    def __init__(self, message: str | None = None, *, state=None):
        self.state = state
        super().__init__(message)
