from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Django app configuration for the Accounts app.

    Sign-in and sign-out against Supabase Auth; tokens live in the Django session.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"
