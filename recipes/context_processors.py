from recipes.session import stored_email


def auth_status(request):
    """Navbar sign-in state from the session; never calls Supabase."""
    session = getattr(request, "session", None)
    email = stored_email(session) if session is not None else None
    return {"signed_in": bool(email), "signed_in_email": email}
