"""
Recipe listing and profile queries.

fetch_recipes(client, RecipeFilters(difficulty="easy", search="pasta"))
    -> newest-first recipe rows with the author's email embedded
"""

import logging
from dataclasses import dataclass

from recipes.models import (
    ALL_DIFFICULTIES,
    RECIPE_WITH_AUTHOR_EMAIL,
    RECIPES_TABLE,
    SAVED_TABLE,
    Difficulty,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeFilters:
    difficulty: str = ALL_DIFFICULTIES
    search: str = ""

    @classmethod
    def from_query(cls, params) -> "RecipeFilters":
        """Build filters from request.GET; unknown difficulties fall back to 'all'."""
        difficulty = (params.get("difficulty") or ALL_DIFFICULTIES).strip().lower()
        if difficulty not in Difficulty.values:
            difficulty = ALL_DIFFICULTIES
        return cls(difficulty=difficulty, search=(params.get("q") or "").strip())

    def eq(self) -> dict:
        return {} if self.difficulty == ALL_DIFFICULTIES else {"difficulty": self.difficulty}

    def ilike(self) -> dict:
        return {"title": f"%{self.search}%"} if self.search else {}


def fetch_recipes(client, filters: RecipeFilters | None = None, limit: int | None = None) -> list[dict]:
    """
    Recipes ordered by creation time (newest first).
    :param filters: exact difficulty match and/or case-insensitive title substring (ANDed)
    :param limit: optional cap, used by the home page's featured section
    """
    filters = filters or RecipeFilters()
    return client.select(
        RECIPES_TABLE,
        RECIPE_WITH_AUTHOR_EMAIL,
        eq=filters.eq(),
        ilike=filters.ilike(),
        order_by="created_at",
        descending=True,
        limit=limit,
    )


def fetch_user_recipes(client, user_id: str) -> list[dict]:
    return client.select(RECIPES_TABLE, "*", eq={"user_id": user_id}, order_by="created_at")


def fetch_saved_recipes(client, user_id: str) -> list[dict]:
    """Recipes the user saved, most recently saved first, flattened to recipe rows."""
    rows = client.select(SAVED_TABLE, "recipe:recipes(*)", eq={"user_id": user_id}, order_by="created_at")
    recipes = []
    for row in rows:
        recipe = row.get("recipe")
        if not isinstance(recipe, dict):
            # recipe deleted or hidden by row-level security
            continue
        recipes.append(dict(recipe))
    return recipes
