"""
In-progress recipe drafts for the create form.

A draft holds the variable-length ingredient and step lists while the user
adds, edits and removes rows. Rows are addressed by a client-side id that only
has to be unique within the draft. Field edits are tagged update objects:

    draft.apply(IngredientUpdate(entry_id, IngredientField.AMOUNT, "200"))
    draft.apply(StepUpdate(entry_id, "Whisk the eggs."))

On submit the lists go into the recipe row verbatim and the draft is dropped.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Union
from uuid import uuid4

from django.core.exceptions import ValidationError

from recipes.models import RECIPES_TABLE, Ingredient, Step

logger = logging.getLogger(__name__)

DRAFT_SESSION_KEY = "recipe_draft"


class IngredientField(str, enum.Enum):
    NAME = "name"
    AMOUNT = "amount"
    UNIT = "unit"


@dataclass(frozen=True)
class IngredientUpdate:
    entry_id: str
    field: IngredientField
    value: str


@dataclass(frozen=True)
class StepUpdate:
    entry_id: str
    value: str


DraftUpdate = Union[IngredientUpdate, StepUpdate]


def new_entry_id() -> str:
    return uuid4().hex[:12]


@dataclass
class RecipeDraft:
    ingredients: list[Ingredient] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)

    # ---- ingredients -------------------------------------------------------

    def add_ingredient(self) -> Ingredient:
        entry = Ingredient(id=new_entry_id())
        self.ingredients.append(entry)
        return entry

    def remove_ingredient(self, entry_id: str) -> None:
        self.ingredients = [i for i in self.ingredients if i.id != entry_id]

    # ---- steps -------------------------------------------------------------

    def add_step(self) -> Step:
        entry = Step(id=new_entry_id())
        self.steps.append(entry)
        return entry

    def remove_step(self, entry_id: str) -> None:
        self.steps = [s for s in self.steps if s.id != entry_id]

    # ---- edits -------------------------------------------------------------

    def apply(self, update: DraftUpdate) -> None:
        """Replace one field of one entry. Unknown ids are ignored."""
        if isinstance(update, IngredientUpdate):
            which = IngredientField(update.field)
            for entry in self.ingredients:
                if entry.id != update.entry_id:
                    continue
                if which is IngredientField.NAME:
                    entry.name = update.value
                elif which is IngredientField.AMOUNT:
                    entry.amount = update.value
                else:
                    entry.unit = update.value
        elif isinstance(update, StepUpdate):
            for entry in self.steps:
                if entry.id == update.entry_id:
                    entry.description = update.value
        else:
            raise TypeError(f"Unsupported draft update: {update!r}")

    def errors(self) -> list[str]:
        problems = []
        if any(not i.is_complete() for i in self.ingredients):
            problems.append("Every ingredient needs an amount, a unit and a name.")
        if any(not s.is_complete() for s in self.steps):
            problems.append("Every step needs a description.")
        return problems

    # ---- session round trip --------------------------------------------------

    def to_session(self) -> dict:
        return {
            "ingredients": [i.as_row() for i in self.ingredients],
            "steps": [s.as_row() for s in self.steps],
        }

    @classmethod
    def from_session(cls, data: dict | None) -> "RecipeDraft":
        data = data or {}
        return cls(
            ingredients=[Ingredient(**row) for row in data.get("ingredients") or []],
            steps=[Step(**row) for row in data.get("steps") or []],
        )


def load_draft(session) -> RecipeDraft:
    return RecipeDraft.from_session(session.get(DRAFT_SESSION_KEY))


def save_draft(session, draft: RecipeDraft) -> None:
    session[DRAFT_SESSION_KEY] = draft.to_session()


def discard_draft(session) -> None:
    session.pop(DRAFT_SESSION_KEY, None)


def submit_recipe(client, session_ctx, cleaned: dict, draft: RecipeDraft) -> list[dict]:
    """
    Insert one recipe row built from validated form data and the draft lists.
    Raises Unauthenticated / ValidationError before touching Supabase.
    """
    user_id = session_ctx.require_user("You must be logged in to create a recipe")

    try:
        cooking_time = int(cleaned.get("cooking_time"))
    except (TypeError, ValueError):
        raise ValidationError("Cooking time must be a whole number of minutes.")
    if cooking_time < 1:
        raise ValidationError("Cooking time must be at least 1 minute.")
    problems = draft.errors()
    if problems:
        raise ValidationError(problems)

    payload = {
        "title": cleaned["title"],
        "description": cleaned["description"],
        "cooking_time": cooking_time,
        "difficulty": cleaned["difficulty"],
        "ingredients": [i.as_row() for i in draft.ingredients],
        "steps": [s.as_row() for s in draft.steps],
        "user_id": user_id,
    }
    rows = client.insert(RECIPES_TABLE, payload)
    logger.info("User %s created recipe '%s'", user_id, payload["title"])
    return rows
