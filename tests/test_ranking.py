import unittest
import uuid

from fridgefeast_backend.models import Recipe
from fridgefeast_backend.services.ranking import merge_recipe_batch, sort_recipes


def _recipe(name, *, health=5, match=5, minutes=20):
    return Recipe(
        id=uuid.uuid4(),
        name=name,
        description="desc",
        prep_time_minutes=minutes,
        ingredients=["a", "b"],
        steps=["one", "two"],
        health_score=health,
        match_score=match,
    )


class SortRecipesTests(unittest.TestCase):
    def setUp(self):
        self.recipes = [
            _recipe("A", health=5, match=9, minutes=30),
            _recipe("B", health=8, match=4, minutes=10),
            _recipe("C", health=5, match=9, minutes=10),
            _recipe("D", health=9, match=1, minutes=45),
        ]

    def _names(self, recipes):
        return [recipe.name for recipe in recipes]

    def test_health_descending_and_stable(self):
        self.assertEqual(
            self._names(sort_recipes(self.recipes, "health")), ["D", "B", "A", "C"]
        )

    def test_match_descending_and_stable(self):
        self.assertEqual(
            self._names(sort_recipes(self.recipes, "match")), ["A", "C", "B", "D"]
        )

    def test_time_ascending_and_stable(self):
        self.assertEqual(
            self._names(sort_recipes(self.recipes, "time")), ["B", "C", "A", "D"]
        )

    def test_input_is_not_mutated(self):
        before = self._names(self.recipes)
        sort_recipes(self.recipes, "time")
        self.assertEqual(self._names(self.recipes), before)

    def test_unknown_key_raises(self):
        with self.assertRaises(ValueError):
            sort_recipes(self.recipes, "calories")  # type: ignore[arg-type]


class MergeRecipeBatchTests(unittest.TestCase):
    def test_drops_names_already_shown_case_insensitively(self):
        existing = [_recipe("Spinach Omelette")]
        batch = [
            _recipe("spinach omelette"),
            _recipe("Tomato Rice Bowl"),
            _recipe("TOMATO RICE BOWL"),
        ]

        merged = merge_recipe_batch(existing, batch)

        self.assertEqual([recipe.name for recipe in merged], ["Tomato Rice Bowl"])


if __name__ == "__main__":
    unittest.main()
