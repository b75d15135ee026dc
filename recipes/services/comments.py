import logging

from recipes.models import COMMENT_WITH_AUTHOR, COMMENTS_TABLE

logger = logging.getLogger(__name__)


def fetch_comments(client, recipe_id: str) -> list[dict]:
    """Comments on a recipe with the author's email, newest first."""
    return client.select(
        COMMENTS_TABLE,
        COMMENT_WITH_AUTHOR,
        eq={"recipe_id": recipe_id},
        order_by="created_at",
        descending=True,
    )


def submit_comment(client, session_ctx, recipe_id: str, content: str):
    """
    Insert one comment, then re-fetch the whole list.

    Returns the fresh comment list, or None when ``content`` is blank (nothing
    is sent). The new comment only shows up through the re-fetch; there is no
    local append.
    """
    text = (content or "").strip()
    if not text:
        return None
    user_id = session_ctx.require_user("Please sign in to comment")

    client.insert(COMMENTS_TABLE, {"recipe_id": recipe_id, "user_id": user_id, "content": text})
    logger.info("User %s commented on recipe %s", user_id, recipe_id)
    return fetch_comments(client, recipe_id)
