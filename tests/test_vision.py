import json
import unittest

from fridgefeast_backend.services.vision import (
    LLMVisionClassifier,
    MockVisionClassifier,
    VisionAnalysisError,
    VisionOutputError,
)
from tests.fakes import StubLLMClient

IMAGE = "data:image/jpeg;base64,aGVsbG8gd29ybGQ="


class MockVisionClassifierTests(unittest.TestCase):
    def test_returns_fixture_ingredients(self):
        ingredients = MockVisionClassifier().classify(IMAGE)

        self.assertEqual(
            [item.name for item in ingredients],
            ["bell pepper", "cherry tomato", "eggs", "spinach", "cheddar cheese"],
        )
        self.assertEqual(ingredients[0].category, "produce")


class LLMVisionClassifierTests(unittest.TestCase):
    def test_parses_and_normalizes_model_output(self):
        client = StubLLMClient(
            json.dumps(
                [
                    {"name": " Bell  Pepper ", "confidence": 0.9, "category": "produce"},
                    {"name": "milk", "confidence": 0.6, "quantity": "1 carton"},
                ]
            )
        )

        ingredients = LLMVisionClassifier(client).classify(IMAGE)

        self.assertEqual([item.name for item in ingredients], ["bell pepper", "milk"])
        self.assertEqual(ingredients[1].quantity, "1 carton")
        self.assertEqual(client.calls[0]["image_url"], IMAGE)
        self.assertIn("edible ingredients", client.calls[0]["prompt"])

    def test_unwraps_ingredients_object(self):
        client = StubLLMClient('{"ingredients": [{"name": "kale", "confidence": 1}]}')

        ingredients = LLMVisionClassifier(client).classify(IMAGE)

        self.assertEqual([item.name for item in ingredients], ["kale"])

    def test_unparseable_output_is_a_parse_failure(self):
        client = StubLLMClient("I see a fridge full of food!")

        with self.assertRaises(VisionOutputError) as ctx:
            LLMVisionClassifier(client).classify(IMAGE)

        self.assertEqual(ctx.exception.reason, "parse")
        self.assertEqual(str(ctx.exception), "Vision JSON parse failed")

    def test_wrong_shape_is_a_schema_failure(self):
        client = StubLLMClient('[{"name": "eggs", "confidence": 3}]')

        with self.assertRaises(VisionOutputError) as ctx:
            LLMVisionClassifier(client).classify(IMAGE)

        self.assertEqual(ctx.exception.reason, "schema")
        self.assertEqual(str(ctx.exception), "Invalid ingredient schema")

    def test_empty_output_means_nothing_detected(self):
        self.assertEqual(LLMVisionClassifier(StubLLMClient("")).classify(IMAGE), [])

    def test_transport_failure_is_not_a_content_failure(self):
        client = StubLLMClient(error=ConnectionError("network down"))

        with self.assertRaises(VisionAnalysisError) as ctx:
            LLMVisionClassifier(client).classify(IMAGE)

        self.assertNotIsInstance(ctx.exception, VisionOutputError)


if __name__ == "__main__":
    unittest.main()
