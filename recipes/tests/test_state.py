from uuid import uuid4

from django.test import SimpleTestCase

from recipes.state import MAX_DETAIL_STATES, DetailState, DetailStateStore, MountRegistry


class MountRegistryTests(SimpleTestCase):
    def setUp(self):
        self.registry = MountRegistry(uuid4().hex)

    def test_tokens_increase_per_screen(self):
        first = self.registry.begin("recipe:1")
        second = self.registry.begin("recipe:1")
        other = self.registry.begin("recipe:2")

        self.assertEqual(second, first + 1)
        self.assertEqual(other, 1)
        self.assertFalse(self.registry.is_current("recipe:1", first))
        self.assertTrue(self.registry.is_current("recipe:1", second))

    def test_scopes_do_not_share_counters(self):
        self.registry.begin("recipe:1")
        self.registry.begin("recipe:1")
        self.assertEqual(MountRegistry(uuid4().hex).begin("recipe:1"), 1)

    def test_unknown_screen_reports_zero(self):
        self.assertEqual(self.registry.current("recipe:never"), 0)


class DetailStateStoreTests(SimpleTestCase):
    def test_round_trip_for_same_recipe(self):
        store = DetailStateStore({})
        store.save(DetailState("r-1", recipe={"id": "r-1"}, is_liked=True, likes_count=3, viewer_id="u-1"))

        state = store.load("r-1")

        self.assertTrue(state.is_liked)
        self.assertEqual(state.likes_count, 3)
        self.assertEqual(state.viewer_id, "u-1")

    def test_other_recipe_starts_fresh(self):
        store = DetailStateStore({})
        store.save(DetailState("r-1", is_saved=True, likes_count=3))

        self.assertEqual(store.load("r-2"), DetailState("r-2"))

    def test_opening_a_second_recipe_keeps_the_first(self):
        store = DetailStateStore({})
        store.save(DetailState("r-1", is_liked=True, likes_count=2))
        store.save(DetailState("r-2", likes_count=9))

        self.assertTrue(store.load("r-1").is_liked)
        self.assertEqual(store.load("r-2").likes_count, 9)

    def test_oldest_entries_fall_off(self):
        store = DetailStateStore({})
        for n in range(MAX_DETAIL_STATES + 2):
            store.save(DetailState(f"r-{n}", likes_count=n))
        # touching r-2 again moves it to the end
        store.save(DetailState("r-2", likes_count=2))
        store.save(DetailState("r-extra"))

        self.assertEqual(store.load("r-0"), DetailState("r-0"))
        self.assertEqual(store.load("r-2").likes_count, 2)
        self.assertEqual(store.load("r-6").likes_count, 6)
