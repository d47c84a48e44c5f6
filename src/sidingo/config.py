import os


class Settings:
    PROJECT_NAME: str = "sidingo"
    DEBUG: bool = os.environ.get("SIDINGO_DEBUG", "") == "1"
    LOG_DIR: str = os.environ.get("SIDINGO_LOG_DIR", "log")
    LOG_FILE: str = "sidingo.log"
    LOG_TO_DB: bool = os.environ.get("SIDINGO_LOG_TO_DB", "") == "1"
    DB_DIR: str = os.environ.get("SIDINGO_DB_DIR", "db")
    DB_FILE: str = "sidingo.db"
    VOCAB_DIR: str = os.environ.get("SIDINGO_VOCAB_DIR", "vocabulary")

    # Lesson rules
    LESSON_SIZE: int = 10
    DISTRACTOR_COUNT: int = 3
    SHADOWING_PROBABILITY: float = 0.3
    MAX_HEARTS: int = 5
    XP_PER_QUIZ: int = 10
    XP_PER_SHADOWING: int = 20
    XP_BONUS_COMPLETE: int = 50
    FAILURE_GRACE_SECONDS: float = 1.0

    SESSION_COOKIE_NAME: str = "lesson_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")

    # Content generation
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", os.environ.get("API_KEY", ""))
    GEMINI_API_URL: str = os.environ.get(
        "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    GEMINI_MODEL: str = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
    CONTENT_TIMEOUT_SECONDS: float = float(
        os.environ.get("SIDINGO_CONTENT_TIMEOUT", "8")
    )


settings = Settings()
