"""
Like / save toggles for the recipe detail screen.

The local flag (and the like counter) change together with issuing the remote
delete-or-insert, so the page can show the new state without waiting for a
re-fetch. If Supabase rejects the call the local change is reverted and the
error is re-raised for the view to report.
"""

import logging
from dataclasses import dataclass

from recipes.exceptions import RemoteCallError
from recipes.models import LIKES_TABLE, SAVED_TABLE
from recipes.state import DetailState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    is_liked: bool
    is_saved: bool
    likes_count: int

    @classmethod
    def of(cls, state: DetailState) -> "_Snapshot":
        return cls(state.is_liked, state.is_saved, state.likes_count)

    def restore(self, state: DetailState) -> None:
        state.is_liked = self.is_liked
        state.is_saved = self.is_saved
        state.likes_count = self.likes_count


class InteractionReconciler:
    def __init__(self, client, session_ctx):
        self.client = client
        self.session_ctx = session_ctx

    def _relation(self, state: DetailState, user_id: str) -> dict:
        return {"recipe_id": state.recipe_id, "user_id": user_id}

    def _issue(self, table: str, relation: dict, remove: bool) -> None:
        if remove:
            self.client.delete(table, eq=relation)
        else:
            self.client.insert(table, relation)

    def toggle_like(self, state: DetailState) -> DetailState:
        """Flip the user's like on ``state.recipe_id`` and move the counter by one."""
        user_id = self.session_ctx.require_user("Please sign in to like recipes")
        relation = self._relation(state, user_id)
        before = _Snapshot.of(state)

        state.is_liked = not before.is_liked
        state.likes_count = max(0, before.likes_count + (-1 if before.is_liked else 1))
        try:
            self._issue(LIKES_TABLE, relation, remove=before.is_liked)
        except RemoteCallError:
            logger.exception("Error toggling like on recipe %s", state.recipe_id)
            before.restore(state)
            raise
        return state

    def toggle_save(self, state: DetailState) -> DetailState:
        user_id = self.session_ctx.require_user("Please sign in to save recipes")
        relation = self._relation(state, user_id)
        before = _Snapshot.of(state)

        state.is_saved = not before.is_saved
        try:
            self._issue(SAVED_TABLE, relation, remove=before.is_saved)
        except RemoteCallError:
            logger.exception("Error toggling save on recipe %s", state.recipe_id)
            before.restore(state)
            raise
        return state
