# core/scoring.py
"""
Deterministic scoring for the Image Check quiz.

answers  →  per-category score + traffic-light level + total
total    →  fallback persona id (used when the AI narrator is unavailable)

LEVEL LOGIC
───────────
Thresholds are percentages of a category's maximum score, rounded up:
  score >= ceil(GREEN_PCT  % of max)  → Green   (12 / 15)
  score >= ceil(YELLOW_PCT % of max)  → Yellow  ( 7 / 15)
  otherwise                          → Red

FALLBACK PERSONA (first match wins)
────────────────
  total >= ceil(CHARMER_PCT % of max_total)   → charmer   (48 / 60)
  total >= ceil(STATUE_PCT  % of max_total)   → statue    (38 / 60)
  total <= floor(PIONEER_PCT % of max_total)  → pioneer   (20 / 60)
  otherwise                                  → neighbor

Nothing here reads global mutable state or performs I/O.
"""

from core.questionnaire import (
    QUESTIONS, CATEGORIES, CATEGORY_INFO, MAX_OPTION_VALUE, UNSURE_VALUE, questions_in,
)
from core.personas import PERSONA_IDS, DEFAULT_PERSONA_ID

# ── Levels ────────────────────────────────────────────────────────────────────
RED    = "Red"
YELLOW = "Yellow"
GREEN  = "Green"

LEVEL_COLORS = {
    RED:    "#ef4444",
    YELLOW: "#f97316",
    GREEN:  "#22c55e",
}

GREEN_PCT  = 80
YELLOW_PCT = 46

# ── Fallback persona bands ────────────────────────────────────────────────────
CHARMER_PCT = 80
STATUE_PCT  = 63
PIONEER_PCT = 34


def _pct_ceil(pct: int, whole: int) -> int:
    return -(-pct * whole // 100)


def _pct_floor(pct: int, whole: int) -> int:
    return pct * whole // 100


def _points(value) -> int:
    """Score contribution of one stored answer value."""
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    if value == UNSURE_VALUE:
        return 0
    return max(0, min(MAX_OPTION_VALUE, value))


def category_max_score(category: str, questions: list = None) -> int:
    return len(questions_in(category, questions)) * MAX_OPTION_VALUE


def max_total_score(questions: list = None, categories: list = None) -> int:
    categories = CATEGORIES if categories is None else categories
    return sum(category_max_score(cat, questions) for cat in categories)


def level_thresholds(max_score: int) -> tuple:
    """(green_min, yellow_min) for a category worth `max_score` points."""
    return _pct_ceil(GREEN_PCT, max_score), _pct_ceil(YELLOW_PCT, max_score)


def category_level(score: int, max_score: int) -> str:
    green_min, yellow_min = level_thresholds(max_score)
    if score >= green_min:
        return GREEN
    if score >= yellow_min:
        return YELLOW
    return RED


def compute_summary(answers: dict, questions: list = None, categories: list = None) -> dict:
    """
    Score every category and total them up.

    Parameters
    ----------
    answers    : {question_id: option value}; may be partial or empty
    questions  : question bank, defaults to QUESTIONS
    categories : category display order, defaults to CATEGORIES

    Returns
    -------
    {"summary": [{category, score, max_score, level, color, description, suggestion}, ...],
     "total_score": int}
    """
    questions  = QUESTIONS if questions is None else questions
    categories = CATEGORIES if categories is None else categories
    answers    = answers or {}

    summary = []
    for cat in categories:
        cat_questions = questions_in(cat, questions)
        score = sum(_points(answers.get(q["id"])) for q in cat_questions)
        max_score = len(cat_questions) * MAX_OPTION_VALUE
        level = category_level(score, max_score)
        info = CATEGORY_INFO.get(cat, {})
        summary.append({
            "category":    cat,
            "score":       score,
            "max_score":   max_score,
            "level":       level,
            "color":       LEVEL_COLORS[level],
            "description": info.get("description", ""),
            "suggestion":  info.get("suggestions", {}).get(level, ""),
        })

    total_score = sum(r["score"] for r in summary)
    return {"summary": summary, "total_score": total_score}


def compute_fallback_persona(summary, max_total: int = None) -> str:
    """
    Rule-based persona for degraded mode.

    `summary` is either the dict returned by compute_summary or a bare
    total score. `max_total` defaults to the sum of the summary's category
    maxima, or to the full question bank when only a total is given.
    """
    if isinstance(summary, dict):
        total = summary["total_score"]
        if max_total is None:
            max_total = sum(r["max_score"] for r in summary["summary"])
    else:
        total = summary
    if max_total is None:
        max_total = max_total_score()

    if total >= _pct_ceil(CHARMER_PCT, max_total):
        return "charmer"
    if total >= _pct_ceil(STATUE_PCT, max_total):
        return "statue"
    if total <= _pct_floor(PIONEER_PCT, max_total):
        return "pioneer"
    return "neighbor"


def normalize_persona_id(raw_id, known_ids=None, default_id: str = DEFAULT_PERSONA_ID) -> str:
    """Trim + lower-case `raw_id`; anything outside `known_ids` becomes `default_id`."""
    known_ids = PERSONA_IDS if known_ids is None else known_ids
    if not isinstance(raw_id, str):
        return default_id
    candidate = raw_id.strip().lower()
    return candidate if candidate in known_ids else default_id
