from django.http import QueryDict
from django.test import SimpleTestCase

from recipes.services.listing import (
    RecipeFilters,
    fetch_recipes,
    fetch_saved_recipes,
    fetch_user_recipes,
)
from recipes.tests.fakes import FakeDataClient, recipe_row

USERS = [{"id": "u-1", "email": "alice@example.com"}, {"id": "u-2", "email": "bob@example.com"}]


class RecipeFiltersTests(SimpleTestCase):
    def test_from_query_defaults(self):
        filters = RecipeFilters.from_query(QueryDict(""))
        self.assertEqual(filters, RecipeFilters("all", ""))
        self.assertEqual(filters.eq(), {})
        self.assertEqual(filters.ilike(), {})

    def test_unknown_difficulty_falls_back_to_all(self):
        self.assertEqual(RecipeFilters.from_query(QueryDict("difficulty=extreme")).difficulty, "all")

    def test_search_is_trimmed_and_wrapped(self):
        filters = RecipeFilters.from_query(QueryDict("q=%20soup%20&difficulty=HARD"))
        self.assertEqual(filters.difficulty, "hard")
        self.assertEqual(filters.ilike(), {"title": "%soup%"})


class FetchRecipesTests(SimpleTestCase):
    def setUp(self):
        self.client = FakeDataClient(
            tables={
                "recipes": [
                    recipe_row("r-1", "Pancakes", "easy", minute=1),
                    recipe_row("r-2", "Beef Wellington", "hard", minute=2, user_id="u-2"),
                    recipe_row("r-3", "Tomato Soup", "medium", minute=3),
                    recipe_row("r-4", "Pea soup", "easy", minute=4, user_id="u-2"),
                ]
            },
            users=USERS,
        )

    def test_newest_first_with_author(self):
        rows = fetch_recipes(self.client)
        self.assertEqual([r["id"] for r in rows], ["r-4", "r-3", "r-2", "r-1"])
        self.assertEqual(rows[0]["user"]["email"], "bob@example.com")

    def test_difficulty_filter_is_a_subset_of_unfiltered(self):
        everything = {r["id"] for r in fetch_recipes(self.client)}
        for difficulty in ("all", "easy", "medium", "hard"):
            with self.subTest(difficulty=difficulty):
                rows = fetch_recipes(self.client, RecipeFilters(difficulty=difficulty))
                self.assertTrue({r["id"] for r in rows} <= everything)
                if difficulty != "all":
                    self.assertTrue(rows)
                    self.assertTrue(all(r["difficulty"] == difficulty for r in rows))

    def test_search_is_case_insensitive_and_anded_with_difficulty(self):
        rows = fetch_recipes(self.client, RecipeFilters(search="SOUP"))
        self.assertEqual({r["id"] for r in rows}, {"r-3", "r-4"})

        rows = fetch_recipes(self.client, RecipeFilters(difficulty="easy", search="soup"))
        self.assertEqual([r["id"] for r in rows], ["r-4"])

    def test_limit(self):
        self.assertEqual(len(fetch_recipes(self.client, limit=2)), 2)

    def test_user_recipes(self):
        rows = fetch_user_recipes(self.client, "u-2")
        self.assertEqual([r["id"] for r in rows], ["r-4", "r-2"])


class FetchSavedRecipesTests(SimpleTestCase):
    def test_returns_full_recipe_rows_newest_save_first(self):
        client = FakeDataClient(
            tables={
                "recipes": [recipe_row("r-1", "Pancakes"), recipe_row("r-2", "Soup")],
                "saved_recipes": [
                    {"id": "s1", "user_id": "u-1", "recipe_id": "r-2", "created_at": "2024-02-01T00:00:00+00:00"},
                    {"id": "s2", "user_id": "u-1", "recipe_id": "r-1", "created_at": "2024-03-01T00:00:00+00:00"},
                    {"id": "s3", "user_id": "u-1", "recipe_id": "gone", "created_at": "2024-04-01T00:00:00+00:00"},
                    {"id": "s4", "user_id": "u-2", "recipe_id": "r-2", "created_at": "2024-05-01T00:00:00+00:00"},
                ],
            }
        )

        rows = fetch_saved_recipes(client, "u-1")

        self.assertEqual([r["title"] for r in rows], ["Pancakes", "Soup"])
        self.assertEqual(rows[0]["user_id"], "u-1")
        self.assertEqual(rows[0]["ingredients"][0]["name"], "flour")
        self.assertEqual(rows[0]["steps"][0]["description"], "Mix everything.")
