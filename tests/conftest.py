"""Shared fixtures for Image Check tests.

Provides:
- env vars set before any core imports (no real API key, no cooldown)
- answer-set factories over the real question bank
- fake_response: a stand-in for requests.Response
"""

import os
from unittest.mock import MagicMock

import pytest
import requests

# Set env vars before any core imports
os.environ.setdefault("ANTHROPIC_API_KEY", "")
os.environ.setdefault("NARRATOR_COOLDOWN_SECONDS", "2.0")

from core.questionnaire import QUESTIONS, CATEGORIES, questions_in


def make_answers(value):
    """Every question answered with the same option value."""
    return {q["id"]: value for q in QUESTIONS}


def make_category_answers(per_category):
    """{category: [5 option values]} → answers dict."""
    answers = {}
    for cat, values in per_category.items():
        for q, v in zip(questions_in(cat), values):
            answers[q["id"]] = v
    return answers


def fake_response(text=None, status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    if body is None:
        body = {"content": [{"type": "text", "text": text or ""}]}
    resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error", response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def all_max():
    return make_answers(3)


@pytest.fixture
def all_unsure():
    return make_answers(-1)


@pytest.fixture
def categories():
    return list(CATEGORIES)
