# core/funnel.py
"""
Quiz funnel steps as an explicit state machine.

    hero ──start──▶ quiz ──last answer──▶ diagnosing ──report──▶ result
      ▲               │
      └──back at Q1───┘

State is a plain dict (what Streamlit keeps in st.session_state).
Every transition takes a state and returns a new one; nothing is mutated.

Inside `quiz`, a category intro screen precedes the first question of
each category (every QUESTIONS_PER_CATEGORY questions).
"""

import logging

from core.questionnaire import QUESTIONS, QUESTIONS_PER_CATEGORY

logger = logging.getLogger(__name__)

HERO       = "hero"
QUIZ       = "quiz"
DIAGNOSING = "diagnosing"
RESULT     = "result"

STEPS = [HERO, QUIZ, DIAGNOSING, RESULT]


def initial_state() -> dict:
    return {
        "step": HERO,
        "current_idx": 0,
        "intro_mode": True,
        "answers": {},
        "report": None,
        "diagnosis_error": None,
        "email": "",
        "name": "",
        "unlocked": False,
    }


def _with(state: dict, **changes) -> dict:
    new = dict(state)
    new.update(changes)
    return new


def start(state: dict) -> dict:
    """Begin a fresh quiz. Keeps the captured email and name, locks the results again."""
    logger.info("Quiz started")
    return _with(
        initial_state(),
        step=QUIZ,
        email=state.get("email", ""),
        name=state.get("name", ""),
    )


def restart(state: dict) -> dict:
    return initial_state()


def current_question(state: dict) -> dict:
    return QUESTIONS[state["current_idx"]]


def next_step(state: dict) -> dict:
    if state["step"] != QUIZ:
        return state
    if state["intro_mode"]:
        return _with(state, intro_mode=False)

    idx = state["current_idx"]
    if idx < len(QUESTIONS) - 1:
        nxt = idx + 1
        return _with(state, current_idx=nxt, intro_mode=(nxt % QUESTIONS_PER_CATEGORY == 0))

    logger.info("Quiz complete, %d answers collected", len(state["answers"]))
    return _with(state, step=DIAGNOSING, report=None, diagnosis_error=None)


def previous_step(state: dict) -> dict:
    if state["step"] != QUIZ:
        return state
    idx = state["current_idx"]
    if state["intro_mode"]:
        if idx > 0:
            return _with(state, intro_mode=False, current_idx=idx - 1)
        return _with(state, step=HERO)
    if idx % QUESTIONS_PER_CATEGORY == 0:
        return _with(state, intro_mode=True)
    return _with(state, current_idx=idx - 1)


def answer(state: dict, value: int) -> dict:
    """Record `value` for the current question, then advance."""
    if state["step"] != QUIZ or state["intro_mode"]:
        return state
    answers = dict(state["answers"])
    answers[current_question(state)["id"]] = value
    return next_step(_with(state, answers=answers))


def finish_diagnosis(state: dict, report: dict, error=None) -> dict:
    if state["step"] != DIAGNOSING:
        return state
    return _with(state, step=RESULT, report=report, diagnosis_error=error)


def unlock(state: dict, email: str, name: str = "") -> dict:
    """Email capture: an address unlocks the full category breakdown."""
    email = (email or "").strip()
    if not email:
        return state
    return _with(state, email=email, name=(name or "").strip() or state.get("name", ""), unlocked=True)


def progress(state: dict) -> float:
    if state["step"] in (DIAGNOSING, RESULT):
        return 1.0
    if state["step"] != QUIZ:
        return 0.0
    done = state["current_idx"] + (0 if state["intro_mode"] else 1)
    return done / len(QUESTIONS)


def state_from_query(params: dict, state: dict = None) -> dict:
    """
    Apply landing-page deep links:
      ?email=...   prefill the email and unlock the results
      ?start=true  skip the hero screen
    """
    state = initial_state() if state is None else state
    if str(params.get("start", "")).lower() == "true":
        state = start(state)
    email = params.get("email")
    if email:
        state = unlock(state, email)
    return state
