import json
import unittest

from tests._helpers import StubLLMClient, make_recipe
from videplacard_backend.services.recipes import (
    Course,
    DecodeFailure,
    ParsedRecipes,
    PlainText,
    RecipeFormat,
    RecipeRequest,
    WineColor,
    build_recipe_prompt,
    decode_recipe_response,
    generate_recipes,
    parse_recipe,
    parse_recipe_request,
)


class ParseRecipeRequestTests(unittest.TestCase):
    def test_defaults(self):
        request = parse_recipe_request({"ingredients": ["Riz", " ", "Pâtes"]})
        self.assertEqual(request.ingredients, ["Riz", "Pâtes"])
        self.assertEqual(
            request.courses, [Course.STARTER, Course.MAIN, Course.DESSERT]
        )
        self.assertFalse(request.allow_extra_ingredients)
        self.assertIs(request.format, RecipeFormat.COURSES)

    def test_empty_ingredients_rejected(self):
        for payload in ({}, {"ingredients": []}, {"ingredients": ["  "]}, None):
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    parse_recipe_request(payload)

    def test_courses_are_ordered_and_accept_french_tags(self):
        request = parse_recipe_request(
            {"ingredients": ["Riz"], "courses": ["dessert", "entrée"]}
        )
        self.assertEqual(request.courses, [Course.STARTER, Course.DESSERT])

    def test_invalid_options_rejected(self):
        bad_payloads = [
            {"ingredients": ["Riz"], "courses": ["brunch"]},
            {"ingredients": ["Riz"], "courses": "main"},
            {"ingredients": ["Riz"], "format": "yaml"},
            {"ingredients": ["Riz"], "allowExtraIngredients": "yes"},
        ]
        for payload in bad_payloads:
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    parse_recipe_request(payload)


class BuildRecipePromptTests(unittest.TestCase):
    def test_lists_ingredients_and_requested_courses(self):
        prompt = build_recipe_prompt(
            RecipeRequest(
                ingredients=["Riz", "Lait"],
                courses=[Course.DESSERT],
                allow_extra_ingredients=True,
            )
        )
        self.assertIn("Riz, Lait", prompt)
        self.assertIn("(dessert)", prompt)
        self.assertIn("ingrédients supplémentaires", prompt)

    def test_text_format_names_the_markdown_shopping_section(self):
        for allow_extra in (True, False):
            with self.subTest(allow_extra=allow_extra):
                prompt = build_recipe_prompt(
                    RecipeRequest(
                        ingredients=["Riz"],
                        allow_extra_ingredients=allow_extra,
                        format=RecipeFormat.TEXT,
                    )
                )
                self.assertNotIn("toBuy", prompt)
                self.assertIn("À acheter", prompt)

    def test_structured_formats_name_the_to_buy_field(self):
        for recipe_format in (RecipeFormat.LIST, RecipeFormat.COURSES):
            with self.subTest(format=recipe_format):
                prompt = build_recipe_prompt(
                    RecipeRequest(ingredients=["Riz"], format=recipe_format)
                )
                self.assertIn("toBuy", prompt)


class ParseRecipeTests(unittest.TestCase):
    def test_wine_color_is_normalized(self):
        for raw, expected in [
            ("Rouge", WineColor.RED),
            ("rosé", WineColor.ROSE),
            ("Pétillant", WineColor.SPARKLING),
            ("white", WineColor.WHITE),
        ]:
            with self.subTest(raw=raw):
                recipe = parse_recipe(make_recipe(color=raw))
                self.assertEqual(recipe["wine"]["color"], expected.value)

    def test_unknown_wine_color_rejected(self):
        with self.assertRaises(ValueError):
            parse_recipe(make_recipe(color="orange"))

    def test_missing_fields_rejected(self):
        recipe = make_recipe()
        del recipe["steps"]
        with self.assertRaises(ValueError):
            parse_recipe(recipe)
        with self.assertRaises(ValueError):
            parse_recipe("not a recipe")

    def test_optional_unused_ingredients_default_to_empty(self):
        recipe = make_recipe()
        del recipe["unusedIngredients"]
        self.assertEqual(parse_recipe(recipe)["unusedIngredients"], [])

    def test_non_scalar_list_items_are_dropped(self):
        recipe = make_recipe()
        recipe["usedIngredients"] = ["Riz", None, {"nom": "Lait"}, ["Œufs"], 2, True]
        recipe["toBuy"] = [None]

        parsed = parse_recipe(recipe)

        self.assertEqual(parsed["usedIngredients"], ["Riz", "2"])
        self.assertEqual(parsed["toBuy"], [])


class DecodeRecipeResponseTests(unittest.TestCase):
    def test_courses_shape(self):
        payload = {
            "starter": [make_recipe("Salade"), make_recipe("Soupe")],
            "main": [make_recipe("Risotto"), make_recipe("Gratin")],
            "dessert": [make_recipe("Crêpes"), make_recipe("Riz au lait")],
        }
        result = decode_recipe_response(
            json.dumps(payload), RecipeFormat.COURSES, Course.order()
        )
        self.assertIsInstance(result, ParsedRecipes)
        self.assertEqual(list(result.value), ["starter", "main", "dessert"])
        self.assertEqual(
            [recipe["title"] for recipe in result.value["main"]],
            ["Risotto", "Gratin"],
        )
        self.assertEqual(result.missing_courses, [])

    def test_code_fences_are_tolerated(self):
        text = "```json\n" + json.dumps([make_recipe()] * 3) + "\n```"
        result = decode_recipe_response(text, RecipeFormat.LIST)
        self.assertIsInstance(result, ParsedRecipes)
        self.assertEqual(len(result.value), 3)

    def test_partial_courses_reports_missing(self):
        payload = {
            "plat": [make_recipe("Risotto"), make_recipe("Gratin")],
            "dessert": [make_recipe(color="bleu")],
        }
        result = decode_recipe_response(
            json.dumps(payload), RecipeFormat.COURSES, Course.order()
        )
        self.assertIsInstance(result, ParsedRecipes)
        self.assertEqual(list(result.value), ["main"])
        self.assertEqual(
            result.missing_courses, [Course.STARTER, Course.DESSERT]
        )

    def test_extra_options_are_trimmed(self):
        payload = {"main": [make_recipe(str(n)) for n in range(4)]}
        result = decode_recipe_response(
            json.dumps(payload), RecipeFormat.COURSES, [Course.MAIN]
        )
        self.assertEqual(len(result.value["main"]), 2)

    def test_no_requested_course_is_a_failure(self):
        payload = {"dessert": [make_recipe()]}
        result = decode_recipe_response(
            json.dumps(payload), RecipeFormat.COURSES, [Course.MAIN]
        )
        self.assertIsInstance(result, DecodeFailure)

    def test_malformed_json_is_a_failure_with_raw_text(self):
        text = '[{"title": "Pâtes", '
        result = decode_recipe_response(text, RecipeFormat.LIST)
        self.assertIsInstance(result, DecodeFailure)
        self.assertEqual(result.raw_text, text)

    def test_list_requires_three_recipes(self):
        result = decode_recipe_response(
            json.dumps([make_recipe()]), RecipeFormat.LIST
        )
        self.assertIsInstance(result, DecodeFailure)

    def test_text_format(self):
        result = decode_recipe_response("## Pâtes\n...", RecipeFormat.TEXT)
        self.assertEqual(result, PlainText(text="## Pâtes\n..."))

    def test_empty_output_is_a_failure(self):
        for recipe_format in RecipeFormat:
            with self.subTest(format=recipe_format):
                result = decode_recipe_response("  ", recipe_format)
                self.assertIsInstance(result, DecodeFailure)


class GenerateRecipesTests(unittest.TestCase):
    def test_sends_one_prompt(self):
        client = StubLLMClient(raw_text=json.dumps([make_recipe()] * 3))
        result = generate_recipes(
            client,
            RecipeRequest(ingredients=["Riz"], format=RecipeFormat.LIST),
        )
        self.assertIsInstance(result, ParsedRecipes)
        self.assertEqual(len(client.calls), 1)
        method, kwargs = client.calls[0]
        self.assertEqual(method, "run_prompt")
        self.assertIn("Riz", kwargs["prompt"])
        self.assertTrue(kwargs["system_prompt"])


if __name__ == "__main__":
    unittest.main()
