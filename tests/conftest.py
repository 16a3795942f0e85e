import pytest

from helpers.fakes import (
    FakeIdentity,
    FakeQuestionRepository,
    FakeResponseStore,
    FakeTierLookup,
    RecordingCallbacks,
)
from riskquiz_engine.bank import QuestionBank


@pytest.fixture(scope="session")
def bank():
    """Load the v1/ question bank once for the entire test session."""
    b = QuestionBank()
    b.load()
    return b


@pytest.fixture
def responses():
    return FakeResponseStore()


@pytest.fixture
def identity():
    return FakeIdentity("user1")


@pytest.fixture
def callbacks():
    return RecordingCallbacks()


@pytest.fixture
def empty_repo():
    return FakeQuestionRepository()


@pytest.fixture
def no_tiers():
    return FakeTierLookup()
