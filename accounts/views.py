import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods, require_POST

from recipes.exceptions import RemoteCallError
from recipes.session import clear_auth, store_auth

from .forms import LoginForm

logger = logging.getLogger(__name__)


def _safe_next(request, default: str = "recipes:recipe_list"):
    target = request.POST.get("next") or request.GET.get("next")
    if target and url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}):
        return target
    return default


@require_http_methods(["GET", "POST"])
def login_view(request):
    if request.method == "POST":
        form = LoginForm(request.POST)
        if form.is_valid():
            try:
                payload = request.data_client.sign_in(form.cleaned_data["email"], form.cleaned_data["password"])
            except RemoteCallError as e:
                messages.error(request, e.message)
            else:
                # new session key so a pre-login session id can't be reused
                request.session.cycle_key()
                store_auth(request.session, payload)
                logger.info("User %s signed in", payload["user"].get("id"))
                messages.success(request, "Signed in.")
                return redirect(_safe_next(request))
    else:
        form = LoginForm()
    return render(request, "accounts/login.html", {"form": form, "next": request.POST.get("next") or request.GET.get("next", "")})


@require_POST
def logout_view(request):
    try:
        request.data_client.sign_out()
    except RemoteCallError:
        logger.warning("Supabase sign-out failed; clearing the local session anyway.")
    clear_auth(request.session)
    request.session.flush()
    return redirect("recipes:home")
