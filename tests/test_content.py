import json
import unittest

from monkmode.content.deck import ContentError, import_bulk_json, load_seed
from monkmode.models import VariantKind

SEED = {
    "flashcards": [
        {"id": "c1", "question": "H2O?", "answer": "Water", "course": "Chem", "chapter": "Basics"},
        {
            "id": "c2",
            "question": "NaCl?",
            "answer": "Salt",
            "course": "Chem",
            "chapter": "Basics",
            "type": "multipleChoice",
            "choices": ["Sugar", "Salt"],
            "correctIndex": 1,
        },
        {
            "id": "c3",
            "question": "Water is ___",
            "answer": "H2O",
            "course": "Chem",
            "chapter": "Basics",
            "type": "fillInBlank",
            "flow": {"role": "lateral", "parentId": "c1", "position": 0, "siblingCount": 1},
        },
        {"question": "Mitochondria?", "answer": "Powerhouse", "course": "Bio", "chapter": "Cells"},
    ],
    "chapters": [
        {"course": "Bio", "chapter": "Cells", "paragraphs": ["Cells are small.", "They divide."]},
    ],
}


class ContentImportTests(unittest.TestCase):
    def test_bulk_import_files_cards_under_course(self) -> None:
        text = json.dumps(
            [
                {"question": "Hola", "answer": "Hello"},
                {"question": "Adios", "answer": "Bye", "imageUrl": None, "additionalInfo": "informal"},
            ]
        )
        items = import_bulk_json(text, "Spanish", "Greetings")
        self.assertEqual([i.question for i in items], ["Hola", "Adios"])
        self.assertTrue(all(i.course == "Spanish" and i.chapter == "Greetings" for i in items))
        self.assertEqual(len({i.id for i in items}), 2)
        self.assertEqual(items[1].additional_info, "informal")
        self.assertIsNone(items[0].image_url)

    def test_bulk_import_rejects_bad_input(self) -> None:
        with self.assertRaises(ContentError):
            import_bulk_json("{not json", "c", "ch")
        with self.assertRaises(ContentError):
            import_bulk_json(json.dumps({"question": "q"}), "c", "ch")
        with self.assertRaises(ContentError):
            import_bulk_json(json.dumps([{"question": "q"}]), "c", "ch")

    def test_seed_document(self) -> None:
        deck = load_seed(json.dumps(SEED))
        self.assertEqual(len(deck), 4)
        self.assertEqual(deck.courses(), ["Chem", "Bio"])
        self.assertEqual(deck.chapters_for("Chem"), ["Basics"])
        self.assertEqual([i.id for i in deck.items_for("Chem", "Basics")], ["c1", "c2", "c3"])
        self.assertEqual(len(deck.items_for()), 4)

        mc = deck.items_for("Chem")[1]
        self.assertEqual(mc.variant.kind, VariantKind.MULTIPLE_CHOICE)
        self.assertEqual(mc.choices, ["Sugar", "Salt"])

        self.assertEqual([i.id for i in deck.lateral_variants("c1")], ["c3"])

        chapter = deck.reader_chapter("Bio", "Cells")
        self.assertIsNotNone(chapter)
        self.assertIn("They divide.", chapter.text)
        self.assertIsNone(deck.reader_chapter("Bio", "Nope"))

    def test_seed_with_invalid_multiple_choice(self) -> None:
        bad = {"flashcards": [{"question": "q", "answer": "x", "type": "multipleChoice", "choices": ["y"]}]}
        with self.assertRaises(ContentError):
            load_seed(json.dumps(bad))

    def test_seed_with_unknown_type(self) -> None:
        bad = [{"question": "q", "answer": "x", "type": "essay"}]
        with self.assertRaises(ContentError):
            load_seed(json.dumps(bad))


if __name__ == "__main__":
    unittest.main()
