from django.utils.functional import SimpleLazyObject

from recipes.services.supabase_client import SupabaseDataClient
from recipes.session import ANONYMOUS, resolve_session_context, stored_tokens


def client_for_session(session) -> SupabaseDataClient:
    access_token, refresh_token = stored_tokens(session)
    return SupabaseDataClient.from_settings(access_token=access_token, refresh_token=refresh_token)


def _get_session_ctx(request):
    if not hasattr(request, "_cached_session_ctx"):
        access_token, _ = stored_tokens(request.session)
        if access_token:
            request._cached_session_ctx = resolve_session_context(request.session, request.data_client)
        else:
            request._cached_session_ctx = ANONYMOUS
    return request._cached_session_ctx


class SupabaseSessionMiddleware:
    """
    Attach ``request.data_client`` and ``request.session_ctx``.

    The client is cheap to build (it connects on first query). The session
    context is lazy so pages that never need the user skip the lookup.
    Must run after SessionMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.data_client = client_for_session(request.session)
        request.session_ctx = SimpleLazyObject(lambda: _get_session_ctx(request))
        return self.get_response(request)
