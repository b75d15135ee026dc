from datetime import datetime

from django import template
from django.utils.dateparse import parse_datetime

register = template.Library()


@register.filter
def as_datetime(value):
    """
    Supabase sends timestamps as ISO strings; turn them into datetimes so the
    built-in ``timesince`` / ``date`` filters work on them.

    Usage: {{ recipe.created_at|as_datetime|timesince }} ago
    Returns None for missing or unparseable values.
    """
    if isinstance(value, datetime):
        return value
    try:
        return parse_datetime(str(value or ""))
    except ValueError:
        return None


@register.simple_tag(takes_context=True)
def nav_active(context, url_name: str, css: str = "active"):
    """Return ``css`` when the current request is on ``url_name``."""
    request = context.get("request")
    match = getattr(request, "resolver_match", None)
    if match and match.view_name == url_name:
        return css
    return ""


@register.filter
def author_email(row):
    """Email of the embedded ``user`` of a recipe/comment row, or ''."""
    user = (row or {}).get("user") if hasattr(row, "get") else None
    return (user or {}).get("email") or ""
