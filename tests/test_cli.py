import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from fridgefeast_backend import create_app
from fridgefeast_backend.cli import main
from fridgefeast_backend.config import PLACEHOLDER_IMAGE_URL
from fridgefeast_backend.services.preferences import LAST_FILTERS_KEY


class CommandLineTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)
        self.photo = self.tmp / "fridge.jpg"
        self.photo.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg-bytes")
        self.app = create_app({"TESTING": True, "MOCK_MODE": True})

    def _run(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            code = main([str(self.photo), *argv], app=self.app)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_prints_sorted_recipes_from_all_batches(self):
        code, out, _ = self._run("--sort", "time", "--more", "1")

        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(len(payload["ingredients"]), 5)
        self.assertEqual(payload["sortBy"], "time")
        names = [recipe["name"].lower() for recipe in payload["recipes"]]
        self.assertEqual(len(names), 8)
        self.assertEqual(len(set(names)), 8)
        minutes = [recipe["prep_time_minutes"] for recipe in payload["recipes"]]
        self.assertEqual(minutes, sorted(minutes))

    def test_images_are_attached_when_requested(self):
        code, out, _ = self._run("--count", "2", "--images")

        self.assertEqual(code, 0)
        recipes = json.loads(out)["recipes"]
        self.assertEqual(len(recipes), 2)
        placeholder_base = PLACEHOLDER_IMAGE_URL.split("?")[0]
        for recipe in recipes:
            self.assertTrue(recipe["image_url"].startswith(placeholder_base))

    def test_without_prefs_file_nothing_is_written(self):
        code, out, _ = self._run("--filter", "vegan")

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["sortBy"], "match")
        self.assertEqual(sorted(path.name for path in self.tmp.iterdir()), ["fridge.jpg"])

    def test_prefs_file_remembers_filters(self):
        prefs = self.tmp / "prefs.json"

        code, _, _ = self._run("--filter", "vegan", "--filter", "quick", "--prefs", str(prefs))

        self.assertEqual(code, 0)
        stored = json.loads(prefs.read_text())
        self.assertEqual(
            json.loads(stored[LAST_FILTERS_KEY]), {"vegan": True, "quick": True}
        )

    def test_profile_default_sort_comes_from_prefs_file(self):
        prefs = self.tmp / "prefs.json"
        prefs.write_text(json.dumps({"ff.prefs.profile": json.dumps({"defaultSort": "health"})}))

        code, out, _ = self._run("--prefs", str(prefs))

        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(payload["sortBy"], "health")
        scores = [recipe["health_score"] for recipe in payload["recipes"]]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_missing_photo_is_reported(self):
        self.photo.unlink()

        code, out, err = self._run()

        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("fridgefeast:", err)

    def test_invalid_count_is_a_recipe_failure(self):
        code, _, err = self._run("--count", "11")

        self.assertEqual(code, 1)
        self.assertIn("Invalid recipe request", err)


if __name__ == "__main__":
    unittest.main()
