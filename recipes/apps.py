from django.apps import AppConfig


class RecipesConfig(AppConfig):
    """App configuration for the recipes application (screens, services, Supabase access)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "recipes"
