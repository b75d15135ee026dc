"""
Data model for RecipeShare.

Notes:
- Rows live in Supabase, not in Django's database. Nothing here is a Django
  ``Model``; we only borrow ``TextChoices`` for the difficulty enum so forms and
  templates can use ``.choices`` / ``.label`` as usual.
- Ingredients and steps are embedded in the recipe row as JSON arrays. Their
  ids are generated client-side while a draft is being edited.
"""

from dataclasses import asdict, dataclass

from django.db import models


# Supabase collections
RECIPES_TABLE = "recipes"
COMMENTS_TABLE = "comments"
LIKES_TABLE = "likes"
SAVED_TABLE = "saved_recipes"

# PostgREST embeds for author details
RECIPE_WITH_AUTHOR = "*, user:users(id, email)"
RECIPE_WITH_AUTHOR_EMAIL = "*, user:users(email)"
COMMENT_WITH_AUTHOR = "*, user:users(email)"


class Difficulty(models.TextChoices):
    EASY = "easy", "Easy"
    MEDIUM = "medium", "Medium"
    HARD = "hard", "Hard"


ALL_DIFFICULTIES = "all"


@dataclass
class Ingredient:
    """One line of a recipe's ingredient list, e.g. ``2 cups flour``."""

    id: str
    name: str = ""
    amount: str = ""
    unit: str = ""

    def is_complete(self) -> bool:
        return all(v.strip() for v in (self.name, self.amount, self.unit))

    def as_row(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        return " ".join(p for p in (self.amount, self.unit, self.name) if p).strip()


@dataclass
class Step:
    id: str
    description: str = ""

    def is_complete(self) -> bool:
        return bool(self.description.strip())

    def as_row(self) -> dict:
        return asdict(self)
