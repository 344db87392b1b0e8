import unittest

from fridgefeast_backend.services.scoring import compute_match_score


class ComputeMatchScoreTests(unittest.TestCase):
    def test_fridge_scenario_counts_olive_oil_as_standard(self):
        detected = {
            "bell pepper",
            "cherry tomato",
            "spinach",
            "eggs",
            "cheddar cheese",
        }
        recipe = [
            "bell pepper",
            "cherry tomato",
            "spinach",
            "eggs",
            "cheddar cheese",
            "olive oil",
            "salt",
            "pepper",
        ]
        # union: 5 + olive oil (1.0) + salt (0.25) + pepper (0.25) = 6.5
        # intersection: 5.0 -> raw 0.769 -> 1 + 6.92 -> 8
        self.assertEqual(compute_match_score(detected, recipe), 8)

    def test_empty_inputs_score_one(self):
        self.assertEqual(compute_match_score(set(), []), 1)
        self.assertEqual(compute_match_score(set(), ["eggs", "milk"]), 1)
        self.assertEqual(compute_match_score({"eggs"}, []), 1)

    def test_no_overlap_scores_one(self):
        self.assertEqual(compute_match_score({"tofu"}, ["beef", "rice"]), 1)

    def test_identical_sets_score_ten(self):
        detected = {"eggs", "spinach", "salt"}
        self.assertEqual(
            compute_match_score(detected, ["Eggs", "SPINACH", "Salt"]), 10
        )

    def test_recipe_case_is_ignored(self):
        self.assertEqual(
            compute_match_score({"eggs", "milk"}, ["EGGS", "Milk"]),
            compute_match_score({"eggs", "milk"}, ["eggs", "milk"]),
        )

    def test_staple_overlap_scores_below_fresh_overlap(self):
        detected = {"chicken", "basil", "salt"}
        staple_match = compute_match_score(detected, ["salt", "rice"])
        fresh_match = compute_match_score(detected, ["basil", "rice"])
        self.assertEqual(staple_match, 2)
        self.assertEqual(fresh_match, 4)
        self.assertLess(staple_match, fresh_match)

    def test_order_and_duplicates_do_not_matter(self):
        detected = {"eggs", "spinach", "feta"}
        baseline = compute_match_score(detected, ["spinach", "eggs", "flour"])
        variants = [
            ["eggs", "flour", "spinach"],
            ["Eggs", "eggs", "spinach", "FLOUR", "flour"],
        ]
        for recipe in variants:
            with self.subTest(recipe=recipe):
                self.assertEqual(compute_match_score(detected, recipe), baseline)

    def test_half_overlap_rounds_up(self):
        # raw 0.5 -> 1 + 4.5 = 5.5 -> 6
        self.assertEqual(
            compute_match_score({"a", "b"}, ["a", "b", "c", "d"]), 6
        )

    def test_scores_stay_in_range(self):
        detected = {"eggs", "milk", "salt", "oil", "spinach"}
        recipes = [
            [],
            ["salt"],
            ["eggs", "milk", "salt", "oil", "spinach"],
            ["beef", "rice", "water", "sugar"],
            ["soy sauce", "vinegar", "butter", "eggs"],
        ]
        for recipe in recipes:
            with self.subTest(recipe=recipe):
                score = compute_match_score(detected, recipe)
                self.assertIsInstance(score, int)
                self.assertGreaterEqual(score, 1)
                self.assertLessEqual(score, 10)


if __name__ == "__main__":
    unittest.main()
