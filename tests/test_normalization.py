import unittest

from fridgefeast_backend.models import Ingredient
from fridgefeast_backend.services.normalization import (
    normalize_ingredient_name,
    normalize_ingredients,
    singular_key,
)
from fridgefeast_backend.services.scoring import compute_match_score


class NormalizeIngredientNameTests(unittest.TestCase):
    def test_required_examples(self):
        cases = {
            "Eggs": "eggs",
            "Bell Pepper": "bell pepper",
            " Cheddar   CHEESE ": "cheddar cheese",
            "Sun-Dried Tomatoes": "sun-dried tomatoes",
            "Jalapeño": "jalapeño",
            "   ": "",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(normalize_ingredient_name(raw), expected)

    def test_singular_key_only_touches_last_word(self):
        self.assertEqual(singular_key("cherry tomatoes"), "cherry tomato")
        self.assertEqual(singular_key("eggs"), "egg")
        self.assertEqual(singular_key(""), "")


class NormalizeIngredientsTests(unittest.TestCase):
    def test_plural_variants_merge_keeping_first_spelling(self):
        result = normalize_ingredients(
            [
                Ingredient(name="Cherry Tomatoes", confidence=0.5),
                Ingredient(name="cherry tomato", confidence=0.9, category="produce"),
                Ingredient(name="Spinach", confidence=0.7),
            ]
        )

        self.assertEqual([item.name for item in result], ["cherry tomatoes", "spinach"])
        self.assertEqual(result[0].confidence, 0.9)

    def test_blank_names_are_dropped(self):
        result = normalize_ingredients([Ingredient(name="  ", confidence=0.4)])
        self.assertEqual(result, [])

    def test_punctuated_names_still_match_recipe_text(self):
        detected = normalize_ingredients(
            [
                Ingredient(name="Sun-Dried Tomatoes", confidence=0.8),
                Ingredient(name="Jalapeño", confidence=0.6),
            ]
        )
        detected_set = {item.name for item in detected}

        self.assertEqual(detected_set, {"sun-dried tomatoes", "jalapeño"})
        self.assertEqual(
            compute_match_score(detected_set, ["sun-dried tomatoes", "Jalapeño"]),
            10,
        )


if __name__ == "__main__":
    unittest.main()
