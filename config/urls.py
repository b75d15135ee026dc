from django.urls import path, include

urlpatterns = [
    # Recipes app (namespaced): home, listing, detail, create, profile
    path("", include(("recipes.urls", "recipes"), namespace="recipes")),

    # Supabase-backed sign in / sign out
    path("auth/", include(("accounts.urls", "accounts"), namespace="accounts")),
]
