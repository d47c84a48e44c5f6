"""
Unit tests for sidingo.vocabulary: catalog loading with pandas.
"""

from sidingo.models import Category
from sidingo.vocabulary import DEFAULT_CATALOG, VocabularyManager


def write_csv(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestVocabularyManager:
    def test_load_when_directory_missing_then_default_catalog(self, tmp_path):
        manager = VocabularyManager(str(tmp_path / "missing"))
        manager.load_all()

        assert manager.get_catalog() == DEFAULT_CATALOG
        assert len(manager.get_catalog()) == 20

    def test_load_when_csv_present_then_entries_parsed(self, tmp_path):
        write_csv(
            tmp_path / "travel.csv",
            "id,target,native,category,image\n"
            "101,Ticket,Billet,Travel,https://example.test/t.png\n"
            "102,Hotel,Hôtel,Travel,\n",
        )
        manager = VocabularyManager(str(tmp_path))
        manager.load_all()

        catalog = manager.get_catalog()
        assert [e.id for e in catalog] == [101, 102]
        assert catalog[0].image == "https://example.test/t.png"
        assert catalog[1].image is None
        assert catalog[1].native == "Hôtel"
        assert catalog[1].category == Category.TRAVEL

    def test_load_when_columns_missing_then_file_skipped(self, tmp_path):
        write_csv(tmp_path / "bad.csv", "word,translation\nHund,dog\n")
        manager = VocabularyManager(str(tmp_path))
        manager.load_all()

        assert manager.get_catalog() == DEFAULT_CATALOG

    def test_load_when_unknown_category_then_file_skipped(self, tmp_path):
        write_csv(tmp_path / "a.csv", "id,target,native,category\n1,Dog,Chien,Animals\n")
        write_csv(tmp_path / "b.csv", "id,target,native,category\n2,Cat,Chat,Basics\n")
        manager = VocabularyManager(str(tmp_path))
        manager.load_all()

        assert [e.id for e in manager.get_catalog()] == [2]

    def test_load_when_duplicate_ids_then_first_kept(self, tmp_path):
        write_csv(tmp_path / "a.csv", "id,target,native,category\n1,Dog,Chien,Basics\n")
        write_csv(tmp_path / "b.csv", "id,target,native,category\n1,Cat,Chat,Basics\n")
        manager = VocabularyManager(str(tmp_path))
        manager.load_all()

        catalog = manager.get_catalog()
        assert len(catalog) == 1
        assert catalog[0].target == "Dog"

    def test_get_categories_counts_default_catalog(self, tmp_path):
        manager = VocabularyManager(str(tmp_path))

        counts = {c.name: c.count for c in manager.get_categories()}

        assert counts == {"Basics": 9, "Business": 2, "Food": 3, "Social": 3, "Travel": 3}
