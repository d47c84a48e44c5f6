import glob
import logging
import os
from typing import Dict, List

import pandas as pd

from .models import Category, CategorySummary, VocabularyEntry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "target", "native", "category")

# Frequent English words for beginners (A1/A2) with French as the support language.
DEFAULT_CATALOG: List[VocabularyEntry] = [
    VocabularyEntry(id=1, target="Water", native="L'eau", category=Category.FOOD, image="https://picsum.photos/id/10/150/150"),
    VocabularyEntry(id=2, target="Hello", native="Bonjour", category=Category.BASICS, image="https://picsum.photos/id/338/150/150"),
    VocabularyEntry(id=3, target="To Eat", native="Manger", category=Category.FOOD, image="https://picsum.photos/id/292/150/150"),
    VocabularyEntry(id=4, target="Car", native="Voiture", category=Category.TRAVEL, image="https://picsum.photos/id/111/150/150"),
    VocabularyEntry(id=5, target="Friend", native="Ami", category=Category.SOCIAL, image="https://picsum.photos/id/157/150/150"),
    VocabularyEntry(id=6, target="Thank you", native="Merci", category=Category.BASICS),
    VocabularyEntry(id=7, target="Please", native="S'il vous plaît", category=Category.BASICS),
    VocabularyEntry(id=8, target="Good morning", native="Bonjour (Matin)", category=Category.BASICS),
    VocabularyEntry(id=9, target="Why?", native="Pourquoi ?", category=Category.BASICS),
    VocabularyEntry(id=10, target="Because", native="Parce que", category=Category.BASICS),
    VocabularyEntry(id=11, target="To Speak", native="Parler", category=Category.SOCIAL),
    VocabularyEntry(id=12, target="Coffee", native="Café", category=Category.FOOD),
    VocabularyEntry(id=13, target="Work", native="Travail", category=Category.BUSINESS),
    VocabularyEntry(id=14, target="Yes", native="Oui", category=Category.BASICS),
    VocabularyEntry(id=15, target="No", native="Non", category=Category.BASICS),
    VocabularyEntry(id=16, target="I don't understand", native="Je ne comprends pas", category=Category.BASICS),
    VocabularyEntry(id=17, target="Train", native="Train", category=Category.TRAVEL),
    VocabularyEntry(id=18, target="Airport", native="Aéroport", category=Category.TRAVEL),
    VocabularyEntry(id=19, target="Money", native="Argent", category=Category.BUSINESS),
    VocabularyEntry(id=20, target="Happy", native="Heureux", category=Category.SOCIAL),
]


def _row_to_entry(row: Dict) -> VocabularyEntry:
    image = row.get("image")
    if image is None or pd.isna(image) or not str(image).strip():
        image = None
    return VocabularyEntry(
        id=int(row["id"]),
        target=str(row["target"]).strip(),
        native=str(row["native"]).strip(),
        category=Category(str(row["category"]).strip()),
        image=image,
    )


class VocabularyManager:
    """Loads the static catalog once and serves it read-only."""

    def __init__(self, directory: str):
        self.directory = directory
        self.entries: List[VocabularyEntry] = []

    def load_all(self):
        entries: List[VocabularyEntry] = []
        seen_ids = set()

        csv_files = sorted(glob.glob(os.path.join(self.directory, "*.csv")))
        for file_path in csv_files:
            file_name = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8")
                missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
                if missing:
                    logger.error(f"Skipping {file_name}: Missing columns {missing}.")
                    continue
                loaded = [_row_to_entry(row) for row in df.to_dict("records")]
            except Exception as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue

            for entry in loaded:
                if entry.id in seen_ids:
                    logger.warning(f"Duplicate id {entry.id} in {file_name}, ignored.")
                    continue
                seen_ids.add(entry.id)
                entries.append(entry)
            logger.info(f"Loaded {len(loaded)} words from {file_name}")

        if not entries:
            logger.warning("No vocabulary CSV files loaded. Using the default catalog.")
            entries = list(DEFAULT_CATALOG)

        self.entries = entries

    def get_catalog(self) -> List[VocabularyEntry]:
        if not self.entries:
            self.load_all()
        return list(self.entries)

    def get_categories(self) -> List[CategorySummary]:
        counts: Dict[Category, int] = {}
        for entry in self.get_catalog():
            counts[entry.category] = counts.get(entry.category, 0) + 1
        summaries = [
            CategorySummary(id=category, name=category.value, count=count)
            for category, count in counts.items()
        ]
        summaries.sort(key=lambda x: x.name)
        return summaries
