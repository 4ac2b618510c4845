"""Shared fixtures: a session with a fixed clock, seeded rng and fake clients."""

import random
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from bot_agents.content_client import unique_categories
from flows.session import FlowSession
from state_io import default_state

FIXED_NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


class FakeAssistant:
    def __init__(self):
        self.calls = []

    def reply(self, state, text, rng=None):
        self.calls.append(text)
        return f"assistant: {text}"


class FakeContent:
    def __init__(self, items=None, details=None):
        self.items = items or []
        self.details = details or {}
        self.library_calls = 0

    @property
    def categories(self):
        return unique_categories(self.items)

    def fetch_library(self):
        self.library_calls += 1
        return self.items

    def fetch_detail(self, document_id):
        return self.details.get(document_id)


SAMPLE_ITEMS = [
    {
        "documentId": "v1",
        "title": "Morning Stretch",
        "type": "video",
        "slug": "morning-stretch",
        "descriptionShort": "Ten minutes to wake up",
        "viewCount": "100",
        "likeCount": "5",
        "points": {"value": 20, "earnable": True},
        "duration": {"label": "10 min"},
        "category": {"slug": "workout", "name": "Workout"},
        "tags": [{"name": "Mobility"}],
        "body": [{"action_type": "play-video", "action_url": "https://videos.example/stretch"}],
    },
    {
        "documentId": "a1",
        "title": "Sleep Sounds",
        "type": "audio",
        "slug": "sleep-sounds",
        "descriptionShort": "Drift off",
        "viewCount": "10",
        "likeCount": "1",
        "category": {"slug": "sleep", "name": "Sleep"},
        "tags": [],
    },
    {
        "documentId": "r1",
        "title": "Oat Breakfast Bowl",
        "type": "article",
        "slug": "oat-bowl",
        "descriptionShort": "A quick breakfast",
        "richText": "<p>Mix oats with yoghurt.</p>",
        "viewCount": "300",
        "likeCount": "40",
        "category": {"slug": "recipes", "name": "Recipes"},
        "tags": [{"name": "Breakfast"}, {"name": "Fibre"}],
    },
]


@pytest.fixture
def state():
    return default_state()


@pytest.fixture
def registered_state(state):
    state["user"].update(
        {
            "registered": True,
            "first_name": "Thandi",
            "surname": "Mokoena",
            "email": "thandi@example.com",
        }
    )
    state["current_flow"] = "mainMenu"
    return state


@pytest.fixture
def assistant():
    return FakeAssistant()


@pytest.fixture
def content():
    return FakeContent(list(SAMPLE_ITEMS))


@pytest.fixture
def saved():
    return []


@pytest.fixture
def make_session(assistant, content, saved):
    def factory(state, now=FIXED_NOW, seed=7):
        return FlowSession(
            state,
            assistant=assistant,
            content=content,
            rng=random.Random(seed),
            clock=lambda: now,
            on_save=lambda s: saved.append(dict(s)),
        )

    return factory


def bot_texts(session):
    return [b["content"] for b in session.drain() if b["role"] == "assistant"]


def actions(session):
    return [b["action"] for b in session.state["quick_replies"]]
