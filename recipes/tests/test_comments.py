from django.test import SimpleTestCase

from recipes.exceptions import RemoteCallError, Unauthenticated
from recipes.services.comments import fetch_comments, submit_comment
from recipes.session import ANONYMOUS, SessionContext
from recipes.tests.fakes import FakeDataClient

ALICE = SessionContext(user_id="u-1", email="alice@example.com")


class SubmitCommentTests(SimpleTestCase):
    def setUp(self):
        self.client = FakeDataClient(
            tables={
                "comments": [
                    {"id": "c1", "recipe_id": "r-1", "user_id": "u-2", "content": "Nice",
                     "created_at": "2023-12-31T00:00:00+00:00"},
                ]
            },
            users=[{"id": "u-1", "email": "alice@example.com"}, {"id": "u-2", "email": "bob@example.com"}],
        )

    def test_comment_is_trimmed_and_appears_after_refetch(self):
        comments = submit_comment(self.client, ALICE, "r-1", "  Great recipe!  ")

        self.assertEqual(
            self.client.mutations,
            [("insert", "comments", {"recipe_id": "r-1", "user_id": "u-1", "content": "Great recipe!"})],
        )
        self.assertEqual(comments[0]["content"], "Great recipe!")
        self.assertEqual(comments[0]["user"]["email"], "alice@example.com")
        self.assertEqual(len(comments), 2)

    def test_blank_comment_sends_nothing(self):
        for content in ("", "   ", "\n\t", None):
            with self.subTest(content=content):
                self.assertIsNone(submit_comment(self.client, ALICE, "r-1", content))
        self.assertEqual(self.client.mutations, [])

    def test_requires_signed_in_user(self):
        with self.assertRaises(Unauthenticated) as ctx:
            submit_comment(self.client, ANONYMOUS, "r-1", "Hello")
        self.assertEqual(ctx.exception.message, "Please sign in to comment")
        self.assertEqual(self.client.mutations, [])

    def test_insert_failure_propagates(self):
        self.client.fail.add(("insert", "comments"))
        with self.assertRaises(RemoteCallError):
            submit_comment(self.client, ALICE, "r-1", "Hello")
        self.assertEqual(len(fetch_comments(self.client, "r-1")), 1)
