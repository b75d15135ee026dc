# ---- stdlib -----------------------------------------------------------------
import logging

# ---- Django ------------------------------------------------------------------
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_http_methods, require_POST

# ---- App ---------------------------------------------------------------------
from .exceptions import RecipeNotFound, RemoteCallError, StaleMount, Unauthenticated
from .forms import CommentForm, RecipeForm, RecipeSearchForm
from .services.comments import submit_comment
from .services.detail import fetch_recipe, load_detail, refresh_interactions
from .services.drafts import (
    IngredientField,
    IngredientUpdate,
    StepUpdate,
    discard_draft,
    load_draft,
    save_draft,
    submit_recipe,
)
from .services.interactions import InteractionReconciler
from .services.listing import RecipeFilters, fetch_recipes, fetch_saved_recipes, fetch_user_recipes
from .state import DetailStateStore, ListingState, registry_for

# ---- Logging -----------------------------------------------------------------
logger = logging.getLogger(__name__)

FEATURED_COUNT = 6


def _wants_json(request) -> bool:
    return request.headers.get("x-requested-with") == "XMLHttpRequest"


def _login_url(request) -> str:
    return f"{reverse('accounts:login')}?next={request.get_full_path()}"


# =============================================================================
# Home & listing
# =============================================================================

def home(request):
    try:
        featured = fetch_recipes(request.data_client, limit=FEATURED_COUNT)
    except RemoteCallError:
        featured = []
    return render(request, "recipes/home.html", {"featured": featured})


def recipe_list(request):
    """
    Browse recipes, newest first.
    ?difficulty=easy|medium|hard narrows by difficulty, ?q= matches the title.
    Every request re-runs the query; the difficulty select auto-submits.
    """
    filters = RecipeFilters.from_query(request.GET)
    state = ListingState(difficulty=filters.difficulty, search=filters.search)
    try:
        state.recipes = fetch_recipes(request.data_client, filters)
    except RemoteCallError:
        logger.warning("Error fetching recipes (difficulty=%s, q=%r)", filters.difficulty, filters.search)

    form = RecipeSearchForm(initial={"q": filters.search, "difficulty": filters.difficulty})
    return render(request, "recipes/recipe_list.html", {"state": state, "form": form})


# =============================================================================
# Recipe detail: load, like, save, comment
# =============================================================================

def _render_detail(request, state, comment_form=None):
    try:
        recipe = state.require_recipe()
    except RecipeNotFound as e:
        return render(request, "recipes/recipe_not_found.html", {"message": e.message}, status=404)
    return render(
        request,
        "recipes/recipe_detail.html",
        {
            "state": state,
            "recipe": recipe,
            "comment_form": comment_form or CommentForm(),
        },
    )


def _mount_detail(request, recipe_id: str):
    """
    Load the detail screen and keep the result in the session.
    A superseded load still renders what it fetched, but does not save it.
    """
    store = DetailStateStore(request.session)
    state = store.load(recipe_id)
    try:
        load_detail(request.data_client, request.session_ctx, state, registry_for(request))
    except StaleMount as e:
        # a newer load of this page owns the stored state now
        stale = e.state if e.state is not None else store.load(recipe_id)
        if not stale.found:
            try:
                stale.recipe = fetch_recipe(request.data_client, recipe_id)
            except RemoteCallError:
                logger.warning("Error fetching recipe %s after a superseded load", recipe_id)
        return stale
    store.save(state)
    return state


@require_http_methods(["GET"])
def recipe_detail(request, recipe_id: str):
    return _render_detail(request, _mount_detail(request, recipe_id))


def _toggle(request, recipe_id: str, action: str):
    store = DetailStateStore(request.session)
    state = store.load(recipe_id)
    ctx = request.session_ctx
    reconciler = InteractionReconciler(request.data_client, ctx)
    error = None
    try:
        if ctx.is_authenticated and state.viewer_id != ctx.user_id:
            # no flags for this viewer yet; read them before picking delete or insert
            refresh_interactions(request.data_client, ctx, state)
        if action == "like":
            reconciler.toggle_like(state)
        else:
            reconciler.toggle_save(state)
    except Unauthenticated as e:
        error = e.message
    except RemoteCallError:
        error = "Error updating like status" if action == "like" else "Error updating save status"
    store.save(state)

    if _wants_json(request):
        payload = {"liked": state.is_liked, "saved": state.is_saved, "likes_count": state.likes_count}
        if error:
            payload["error"] = error
            return JsonResponse(payload, status=401 if not ctx.is_authenticated else 502)
        return JsonResponse(payload)

    if error:
        messages.error(request, error)
    elif action == "save":
        messages.success(request, "Recipe saved" if state.is_saved else "Recipe removed from saved")
    return redirect("recipes:recipe_detail", recipe_id=recipe_id)


@require_POST
def toggle_like(request, recipe_id: str):
    return _toggle(request, recipe_id, "like")


@require_POST
def toggle_save(request, recipe_id: str):
    return _toggle(request, recipe_id, "save")


@require_POST
def add_comment(request, recipe_id: str):
    form = CommentForm(request.POST)
    if not form.is_valid():
        # blank comment: nothing is sent
        return redirect("recipes:recipe_detail", recipe_id=recipe_id)

    try:
        comments = submit_comment(
            request.data_client, request.session_ctx, recipe_id, form.cleaned_data["content"]
        )
    except Unauthenticated as e:
        messages.error(request, e.message)
        return redirect("recipes:recipe_detail", recipe_id=recipe_id)
    except RemoteCallError:
        messages.error(request, "Error adding comment")
        state = DetailStateStore(request.session).load(recipe_id)
        if not state.found:
            state = _mount_detail(request, recipe_id)
        # keep what the user typed
        return _render_detail(request, state, comment_form=form)

    store = DetailStateStore(request.session)
    state = store.load(recipe_id)
    state.comments = comments or []
    store.save(state)
    messages.success(request, "Comment added successfully")
    return redirect("recipes:recipe_detail", recipe_id=recipe_id)


# =============================================================================
# Create recipe (session-backed draft)
# =============================================================================

def _sync_draft_from_post(draft, data) -> None:
    """Copy every typed ingredient/step value from the POST into the draft."""
    for entry in list(draft.ingredients):
        for which in IngredientField:
            key = f"ingredient-{entry.id}-{which.value}"
            if key in data:
                draft.apply(IngredientUpdate(entry.id, which, data[key]))
    for entry in list(draft.steps):
        key = f"step-{entry.id}-description"
        if key in data:
            draft.apply(StepUpdate(entry.id, data[key]))


@require_http_methods(["GET", "POST"])
def recipe_create(request):
    draft = load_draft(request.session)

    if request.method == "GET":
        return render(request, "recipes/recipe_form.html", {"form": RecipeForm(), "draft": draft})

    _sync_draft_from_post(draft, request.POST)
    action = request.POST.get("action") or "submit"

    if action != "submit":
        kind, _, entry_id = action.partition(":")
        if kind == "add_ingredient":
            draft.add_ingredient()
        elif kind == "remove_ingredient":
            draft.remove_ingredient(entry_id)
        elif kind == "add_step":
            draft.add_step()
        elif kind == "remove_step":
            draft.remove_step(entry_id)
        save_draft(request.session, draft)
        form = RecipeForm(initial={name: request.POST.get(name) for name in RecipeForm.base_fields})
        return render(request, "recipes/recipe_form.html", {"form": form, "draft": draft})

    save_draft(request.session, draft)
    form = RecipeForm(request.POST)
    if not form.is_valid():
        return render(request, "recipes/recipe_form.html", {"form": form, "draft": draft})

    try:
        submit_recipe(request.data_client, request.session_ctx, form.cleaned_data, draft)
    except Unauthenticated as e:
        messages.error(request, e.message)
        return render(request, "recipes/recipe_form.html", {"form": form, "draft": draft})
    except ValidationError as e:
        for msg in e.messages:
            messages.error(request, msg)
        return render(request, "recipes/recipe_form.html", {"form": form, "draft": draft})
    except RemoteCallError:
        messages.error(request, "Error creating recipe. Please try again.")
        return render(request, "recipes/recipe_form.html", {"form": form, "draft": draft})

    discard_draft(request.session)
    messages.success(request, "Recipe created successfully!")
    return redirect("recipes:recipe_list")


# =============================================================================
# Profile
# =============================================================================

def profile(request):
    ctx = request.session_ctx
    if not ctx.is_authenticated:
        return redirect(_login_url(request))

    active_tab = request.GET.get("tab") or "my-recipes"
    if active_tab not in {"my-recipes", "saved"}:
        active_tab = "my-recipes"

    user_recipes, saved_recipes = [], []
    try:
        user_recipes = fetch_user_recipes(request.data_client, ctx.user_id)
    except RemoteCallError:
        logger.warning("Error fetching recipes of user %s", ctx.user_id)
    try:
        saved_recipes = fetch_saved_recipes(request.data_client, ctx.user_id)
    except RemoteCallError:
        logger.warning("Error fetching saved recipes of user %s", ctx.user_id)

    return render(
        request,
        "recipes/profile.html",
        {
            "active_tab": active_tab,
            "user_recipes": user_recipes,
            "saved_recipes": saved_recipes,
            "email": ctx.email,
        },
    )
