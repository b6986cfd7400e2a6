"""
Pytest configuration and fixtures for tests.
"""
import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from vocabpro.config import Settings
from vocabpro.core.dependencies import get_catalog, get_quiz_service, get_store
from vocabpro.main import app
from vocabpro.services.catalog_service import CatalogService
from vocabpro.services.quiz_service import QuizService
from vocabpro.services.storage_service import AppStateStore, MemoryStorageBackend


FIXED_NOW = datetime(2024, 3, 15, 10, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock; call it to get the current time."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeTimer:
    """Timer that only fires when the test says so."""

    def __init__(self, interval: float, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function()


class FakeTimerFactory:
    """Creates FakeTimers and keeps them for inspection."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, function) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]

    def fire_all(self):
        for timer in list(self.timers):
            timer.fire()


@pytest.fixture
def clock():
    """Clock fixed at 2024-03-15 10:00 UTC."""
    return FakeClock()


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a temporary storage directory, days in UTC."""
    return Settings(STORAGE_DIR=tmp_path / "storage", TIMEZONE="UTC", LOG_LEVEL="DEBUG")


@pytest.fixture
def backend():
    return MemoryStorageBackend()


@pytest.fixture
def store(backend, test_settings, clock, timers):
    """Memory-backed state store with a fake clock and timers."""
    return AppStateStore(
        backend=backend,
        settings=test_settings,
        clock=clock,
        timer_factory=timers
    )


@pytest.fixture
def sample_vocabulary():
    """Raw vocabulary records, as found in vocabulary.json."""
    return {
        "easy": [
            {
                "word": "Abundant",
                "definition": "Existing in large quantities",
                "synonyms": ["plentiful", "ample", "copious"],
                "antonyms": ["scarce", "sparse"]
            },
            {
                "word": "Brave",
                "definition": "Ready to face danger",
                "synonyms": ["courageous", "bold", "fearless"],
                "antonyms": ["cowardly", "timid"]
            },
            {
                "word": "Candid",
                "definition": "Truthful and straightforward",
                "synonyms": ["frank", "honest", "open"],
                "antonyms": ["guarded", "evasive"]
            },
            {
                "word": "Diligent",
                "definition": "Showing care in one's work",
                "synonyms": ["industrious", "assiduous", "careful"],
                "antonyms": ["lazy", "negligent"]
            },
            {
                "word": "Frugal",
                "definition": "Sparing with money or food",
                "synonyms": ["thrifty", "economical", "prudent"],
                "antonyms": ["wasteful", "extravagant"]
            },
            {
                "word": "Mystery",
                "definition": "Something difficult to explain"
            },
        ],
        "hard": [
            {
                "word": "Ephemeral",
                "definition": "Lasting for a very short time",
                "synonyms": ["fleeting", "transient"],
                "antonyms": ["permanent", "enduring"]
            },
        ],
    }


@pytest.fixture
def sample_acronyms():
    return [
        {
            "acronym": "RBI",
            "full": "Reserve Bank of India",
            "distractors": ["Revenue Board of India", "Regional Bank of India", "Reserve Banking Institute"]
        },
        {
            "acronym": "GDP",
            "full": "Gross Domestic Product",
            "options": ["Gross Domestic Product", "General Domestic Product", "Gross Development Product"]
        },
    ]


@pytest.fixture
def sample_oneword():
    return [
        {"phrase": "One who loves books", "answer": "Bibliophile", "distractors": ["Librarian", "Bookworm"]},
        {"phrase": "A person who speaks many languages", "answer": "Polyglot", "distractors": ["Linguist"]},
    ]


@pytest.fixture
def catalog(sample_vocabulary, sample_acronyms, sample_oneword):
    """Small in-memory catalog."""
    return CatalogService.from_records(
        vocabulary=sample_vocabulary,
        acronyms=sample_acronyms,
        oneword=sample_oneword
    )


@pytest.fixture
def quiz_service(store, catalog, rng):
    """Quiz service over the memory store and the small catalog."""
    return QuizService(store, catalog, rng=rng)


@pytest.fixture
def client(store, catalog, quiz_service):
    """API client with the store, catalog and quiz service overridden."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_quiz_service] = lambda: quiz_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
