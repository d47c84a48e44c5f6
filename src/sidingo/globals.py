from .config import settings
from .content import ContentGenerator
from .store import SessionStore
from .vocabulary import VocabularyManager

vocab_manager = VocabularyManager(settings.VOCAB_DIR)
content_generator = ContentGenerator()
session_store = SessionStore()
