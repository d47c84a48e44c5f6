from typing import List, Optional

from fastapi import APIRouter, Cookie, Depends, Form, Response
from fastapi.responses import JSONResponse

from .config import settings
from .content import ContentGenerator
from .globals import content_generator, session_store, vocab_manager
from .models import CategorySummary, EventResult, SessionSnapshot, VocabularyEntry
from .store import SessionStore
from .vocabulary import VocabularyManager

router = APIRouter(prefix="/api")


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def get_vocab_manager() -> VocabularyManager:
    return vocab_manager


def get_content_generator() -> ContentGenerator:
    return content_generator


def get_session_store() -> SessionStore:
    return session_store


def _session_invalid() -> JSONResponse:
    return JSONResponse({"error": "Session invalid"}, status_code=401)


# --- Catalog ---
@router.get("/catalog", response_model=List[VocabularyEntry])
async def get_catalog(vocab: VocabularyManager = Depends(get_vocab_manager)):
    return vocab.get_catalog()


@router.get("/categories", response_model=List[CategorySummary])
async def get_categories(vocab: VocabularyManager = Depends(get_vocab_manager)):
    return vocab.get_categories()


# --- Lesson session ---
@router.post("/session", response_model=SessionSnapshot)
async def start_session(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    vocab: VocabularyManager = Depends(get_vocab_manager),
    generator: ContentGenerator = Depends(get_content_generator),
    store: SessionStore = Depends(get_session_store),
):
    # Starting over always replaces whatever lesson the cookie pointed to.
    store.discard(session_id)
    session = store.create(vocab.get_catalog(), generator)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session.session_id,
        httponly=True,
        samesite="Lax",
    )
    return session.snapshot()


@router.get("/session", response_model=SessionSnapshot)
async def get_session_snapshot(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    session = store.get(session_id)
    if not session:
        return _session_invalid()
    return session.snapshot()


@router.post("/session/select", response_model=EventResult)
async def select_option(
    option_id: int = Form(...),
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    session = store.get(session_id)
    if not session:
        return _session_invalid()
    return session.select_option(option_id)


@router.post("/session/shadowing-done", response_model=EventResult)
async def complete_shadowing(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    session = store.get(session_id)
    if not session:
        return _session_invalid()
    return session.complete_shadowing()


@router.post("/session/check", response_model=EventResult)
async def check_answer(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    session = store.get(session_id)
    if not session:
        return _session_invalid()
    return session.check()


@router.post("/session/advance", response_model=EventResult)
async def advance(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    session = store.get(session_id)
    if not session:
        return _session_invalid()
    return session.advance()


@router.post("/session/reset", response_model=EventResult)
async def reset_session(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    session = store.get(session_id)
    if not session:
        return _session_invalid()
    return session.reset()


@router.delete("/session")
async def end_session(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    store.discard(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}
