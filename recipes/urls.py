from django.urls import path
from . import views

app_name = "recipes"

urlpatterns = [
    # Home / listing
    path("", views.home, name="home"),
    path("recipes/", views.recipe_list, name="recipe_list"),

    # Create (session-backed draft)
    path("create/", views.recipe_create, name="recipe_create"),

    # Detail + interactions (ids are Supabase uuids)
    path("recipes/<str:recipe_id>/", views.recipe_detail, name="recipe_detail"),
    path("recipes/<str:recipe_id>/like/", views.toggle_like, name="toggle_like"),
    path("recipes/<str:recipe_id>/save/", views.toggle_save, name="toggle_save"),
    path("recipes/<str:recipe_id>/comments/", views.add_comment, name="add_comment"),

    # Profile (my recipes / saved)
    path("profile/", views.profile, name="profile"),
]
