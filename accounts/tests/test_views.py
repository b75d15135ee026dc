from unittest.mock import patch

from django.test import TestCase
from django.urls import reverse

from recipes.session import AUTH_SESSION_KEY
from recipes.tests.fakes import FakeDataClient

ALICE = {"id": "u-1", "email": "alice@example.com"}


class LoginLogoutTests(TestCase):
    def setUp(self):
        self.fake = FakeDataClient(users=[ALICE])
        patcher = patch("recipes.middleware.client_for_session", return_value=self.fake)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_login_page_renders(self):
        resp = self.client.get(reverse("accounts:login"))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Sign In")

    def test_successful_login_stores_tokens(self):
        self.fake.sign_in_result = {"access_token": "at", "refresh_token": "rt", "user": ALICE}

        resp = self.client.post(
            reverse("accounts:login"), {"email": "Alice@Example.com ", "password": "pw", "next": "/profile/"}
        )

        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], "/profile/")
        stored = self.client.session[AUTH_SESSION_KEY]
        self.assertEqual(stored["access_token"], "at")
        self.assertEqual(stored["user"]["email"], "alice@example.com")

    def test_offsite_next_is_ignored(self):
        self.fake.sign_in_result = {"access_token": "at", "refresh_token": "rt", "user": ALICE}
        resp = self.client.post(
            reverse("accounts:login"), {"email": "alice@example.com", "password": "pw", "next": "https://evil.test/"}
        )
        self.assertRedirects(resp, reverse("recipes:recipe_list"))

    def test_failed_login_shows_message(self):
        resp = self.client.post(reverse("accounts:login"), {"email": "alice@example.com", "password": "nope"})
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Invalid email or password")
        self.assertNotIn(AUTH_SESSION_KEY, self.client.session)

    def test_logout_clears_session(self):
        self.fake.user = ALICE
        session = self.client.session
        session[AUTH_SESSION_KEY] = {"access_token": "at", "refresh_token": "rt", "user": ALICE}
        session.save()

        resp = self.client.post(reverse("accounts:logout"))

        self.assertRedirects(resp, reverse("recipes:home"))
        self.assertTrue(self.fake.signed_out)
        self.assertNotIn(AUTH_SESSION_KEY, self.client.session)

    def test_logout_survives_remote_failure(self):
        self.fake.fail.add(("sign_out", "auth"))
        session = self.client.session
        session[AUTH_SESSION_KEY] = {"access_token": "at", "refresh_token": "rt", "user": ALICE}
        session.save()

        with self.assertLogs("accounts.views", level="WARNING"):
            self.client.post(reverse("accounts:logout"))

        self.assertNotIn(AUTH_SESSION_KEY, self.client.session)
