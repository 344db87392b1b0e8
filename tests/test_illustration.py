import unittest

from fridgefeast_backend.config import PLACEHOLDER_IMAGE_URL
from fridgefeast_backend.services.illustration import (
    LatchState,
    PlaceholderIllustrator,
    RecipeImageLatch,
)


class PlaceholderIllustratorTests(unittest.TestCase):
    def test_disabled_returns_placeholder(self):
        result = PlaceholderIllustrator().illustrate("Salad", ["kale", "lemon"])
        self.assertEqual(result.status, "disabled")
        self.assertEqual(result.image_url, PLACEHOLDER_IMAGE_URL)

    def test_enabled_without_provider_returns_no_image(self):
        result = PlaceholderIllustrator(enabled=True).illustrate("Salad", [])
        self.assertEqual(result.status, "ok")
        self.assertIsNone(result.image_url)


class RecipeImageLatchTests(unittest.TestCase):
    def test_fetches_only_once(self):
        calls = []

        def fetch():
            calls.append(1)
            return "https://img.test/dish.jpg"

        latch = RecipeImageLatch()
        self.assertIs(latch.state, LatchState.UNREQUESTED)

        first = latch.request(fetch)
        second = latch.request(fetch)

        self.assertEqual(first, "https://img.test/dish.jpg")
        self.assertEqual(second, first)
        self.assertEqual(len(calls), 1)
        self.assertIs(latch.state, LatchState.RESOLVED)

    def test_failure_is_silent_and_final(self):
        calls = []

        def fetch():
            calls.append(1)
            raise ConnectionError("offline")

        latch = RecipeImageLatch()

        with self.assertLogs("fridgefeast_backend.services.illustration", "WARNING"):
            self.assertIsNone(latch.request(fetch))
        self.assertIsNone(latch.request(fetch))
        self.assertIs(latch.state, LatchState.FAILED)
        self.assertEqual(len(calls), 1)

    def test_in_flight_latch_does_not_refetch(self):
        latch = RecipeImageLatch()
        nested = []

        def fetch():
            nested.append(latch.request(lambda: "https://img.test/other.jpg"))
            return None

        latch.request(fetch)

        self.assertEqual(nested, [None])
        self.assertIs(latch.state, LatchState.RESOLVED)


if __name__ == "__main__":
    unittest.main()
