"""
Loads everything the recipe detail screen shows.

Three independent fetches run side by side on a small thread pool:

  (a) the recipe row with its author
  (b) the comments with their authors
  (c) the like count, plus the user's own like/save rows when signed in

Each one fails on its own: a failed recipe fetch means "not found", a failed
comments or interaction fetch leaves that part empty. Results are written into
the screen state only if no newer load of the same screen started meanwhile.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from django.conf import settings

from recipes.exceptions import RemoteCallError, StaleMount
from recipes.models import LIKES_TABLE, RECIPE_WITH_AUTHOR, RECIPES_TABLE, SAVED_TABLE
from recipes.services.comments import fetch_comments
from recipes.state import DetailState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interactions:
    is_liked: bool = False
    is_saved: bool = False
    likes_count: int = 0


def fetch_recipe(client, recipe_id: str):
    return client.select(RECIPES_TABLE, RECIPE_WITH_AUTHOR, eq={"id": recipe_id}, single=True)


def fetch_interactions(client, user_id, recipe_id: str) -> Interactions:
    """Like count for everyone; own like/save flags only when ``user_id`` is set."""
    likes_count = client.count(LIKES_TABLE, eq={"recipe_id": recipe_id})
    if not user_id:
        return Interactions(likes_count=likes_count)
    mine = {"recipe_id": recipe_id, "user_id": user_id}
    return Interactions(
        is_liked=client.exists(LIKES_TABLE, eq=mine),
        is_saved=client.exists(SAVED_TABLE, eq=mine),
        likes_count=likes_count,
    )


def _settle(future, default, what: str, recipe_id: str):
    try:
        return future.result()
    except RemoteCallError:
        logger.exception("Error fetching %s for recipe %s", what, recipe_id)
        return default


def detail_screen(recipe_id: str) -> str:
    return f"recipe:{recipe_id}"


def _apply(state: DetailState, recipe, comments, interactions, viewer_id) -> DetailState:
    state.recipe = recipe
    state.comments = comments or []
    state.is_liked = interactions.is_liked
    state.is_saved = interactions.is_saved
    state.likes_count = interactions.likes_count
    state.viewer_id = viewer_id
    return state


def refresh_interactions(client, session_ctx, state: DetailState) -> DetailState:
    """Re-read the like count and the viewer's like/save flags into ``state``."""
    found = fetch_interactions(client, session_ctx.user_id, state.recipe_id)
    state.is_liked = found.is_liked
    state.is_saved = found.is_saved
    state.likes_count = found.likes_count
    state.viewer_id = session_ctx.user_id
    return state


def load_detail(client, session_ctx, state: DetailState, registry) -> DetailState:
    """
    Mount the detail screen for ``state.recipe_id`` and fill ``state``.
    Raises StaleMount (leaving ``state`` untouched) if a newer mount won; the
    discarded results travel on the exception as a separate state.
    """
    recipe_id = state.recipe_id
    screen = detail_screen(recipe_id)
    token = registry.begin(screen)
    # resolve the user here, not inside the worker threads
    user_id = session_ctx.user_id

    workers = getattr(settings, "DETAIL_FETCH_WORKERS", 3)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="recipe-detail") as pool:
        recipe_f = pool.submit(fetch_recipe, client, recipe_id)
        comments_f = pool.submit(fetch_comments, client, recipe_id)
        interactions_f = pool.submit(fetch_interactions, client, user_id, recipe_id)

        recipe = _settle(recipe_f, None, "recipe", recipe_id)
        comments = _settle(comments_f, [], "comments", recipe_id)
        interactions = _settle(interactions_f, None, "user interactions", recipe_id)

    # flags are only known for this viewer when the interaction fetch worked
    viewer_id = user_id if interactions is not None else None
    interactions = interactions or Interactions()

    if not registry.is_current(screen, token):
        logger.info("Discarding stale load %s of recipe %s", token, recipe_id)
        raise StaleMount(state=_apply(DetailState(recipe_id), recipe, comments, interactions, viewer_id))

    return _apply(state, recipe, comments, interactions, viewer_id)
