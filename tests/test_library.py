import unittest

from tests._helpers import make_recipe
from videplacard_backend.services.library import OTHER_COURSE, SavedRecipeLibrary
from videplacard_backend.services.store import (
    SAVED_RECIPES_KEY,
    InMemoryKeyValueStore,
)


class SavedRecipeLibraryTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryKeyValueStore()
        self.library = SavedRecipeLibrary(self.store)

    def test_save_snapshots_recipe_with_metadata(self):
        saved = self.library.save(make_recipe(color="Blanc"), "plat")

        self.assertEqual(saved["course"], "main")
        self.assertEqual(saved["wine"]["color"], "white")
        self.assertTrue(saved["id"])
        self.assertTrue(saved["savedAt"])
        self.assertEqual(self.store.load(SAVED_RECIPES_KEY), [saved])

    def test_saving_twice_is_not_deduplicated(self):
        recipe = make_recipe()
        first = self.library.save(recipe, "main")
        second = self.library.save(recipe, "main")

        self.assertNotEqual(first["id"], second["id"])
        self.assertEqual(len(self.library.list()), 2)

    def test_invalid_input_rejected(self):
        with self.assertRaises(ValueError):
            self.library.save({"title": "Sans étapes"}, "main")
        with self.assertRaises(ValueError):
            self.library.save(make_recipe(), "goûter")
        self.assertEqual(self.library.list(), [])

    def test_remove_and_clear(self):
        first = self.library.save(make_recipe("A"), "main")
        self.library.save(make_recipe("B"), "dessert")

        self.assertTrue(self.library.remove(first["id"]))
        self.assertFalse(self.library.remove(first["id"]))
        self.assertEqual(self.library.clear(), 1)
        self.assertEqual(self.library.list(), [])

    def test_grouped_puts_unknown_courses_last(self):
        self.store.save(
            SAVED_RECIPES_KEY,
            [
                {"id": "1", "title": "Old", "course": ""},
                {"id": "2", "title": "Tarte", "course": "dessert"},
                {"id": "3", "title": "Soupe", "course": "starter"},
            ],
        )

        grouped = self.library.grouped()

        self.assertEqual(list(grouped), ["starter", "dessert", OTHER_COURSE])
        self.assertEqual(grouped[OTHER_COURSE][0]["title"], "Old")


if __name__ == "__main__":
    unittest.main()
