"""
View-local state for the recipe screens.

Each screen keeps a small mirror of the rows it shows. Detail screen state
(recipe, comments, like/save flags, like count) survives between requests in
the Django session, one entry per recipe, so the like/save endpoints can
update it and the next render shows the change. ``viewer_id`` records whose
like/save flags the entry holds.

``MountRegistry`` hands out generation tokens per (browser session, screen).
A detail load that finishes after a newer load of the same screen started is
discarded instead of overwriting the newer state.
"""

from dataclasses import asdict, dataclass, field
from typing import Optional

from django.core.cache import cache

from recipes.exceptions import RecipeNotFound
from recipes.models import ALL_DIFFICULTIES

DETAIL_SESSION_KEY = "detail_states"
MAX_DETAIL_STATES = 5
MOUNT_TIMEOUT = 60 * 60


@dataclass
class DetailState:
    recipe_id: str
    recipe: Optional[dict] = None
    comments: list = field(default_factory=list)
    is_liked: bool = False
    is_saved: bool = False
    likes_count: int = 0
    viewer_id: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.recipe is not None

    def require_recipe(self) -> dict:
        if self.recipe is None:
            raise RecipeNotFound()
        return self.recipe


@dataclass
class ListingState:
    difficulty: str = ALL_DIFFICULTIES
    search: str = ""
    recipes: list = field(default_factory=list)


class DetailStateStore:
    """Detail screen states of the last few recipes a session opened, keyed by recipe id."""

    def __init__(self, session):
        self.session = session

    def _entries(self) -> dict:
        return dict(self.session.get(DETAIL_SESSION_KEY) or {})

    def load(self, recipe_id: str) -> DetailState:
        data = self._entries().get(str(recipe_id))
        if data:
            return DetailState(**data)
        return DetailState(recipe_id=str(recipe_id))

    def save(self, state: DetailState) -> None:
        entries = self._entries()
        # most recently saved last; the oldest entries fall off
        entries.pop(str(state.recipe_id), None)
        entries[str(state.recipe_id)] = asdict(state)
        while len(entries) > MAX_DETAIL_STATES:
            entries.pop(next(iter(entries)))
        self.session[DETAIL_SESSION_KEY] = entries


class MountRegistry:
    """Generation counters shared across requests through Django's cache."""

    def __init__(self, scope: str):
        self.scope = scope

    def _key(self, screen: str) -> str:
        return f"recipeshare:mount:{self.scope}:{screen}"

    def begin(self, screen: str) -> int:
        key = self._key(screen)
        cache.add(key, 0, MOUNT_TIMEOUT)
        try:
            return cache.incr(key)
        except ValueError:
            # evicted between add() and incr()
            cache.set(key, 1, MOUNT_TIMEOUT)
            return 1

    def current(self, screen: str) -> int:
        return cache.get(self._key(screen), 0)

    def is_current(self, screen: str, token: int) -> bool:
        return self.current(screen) == token


def registry_for(request) -> MountRegistry:
    if not request.session.session_key:
        request.session.save()
    return MountRegistry(request.session.session_key)
