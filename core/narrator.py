# core/narrator.py
"""
AI narrator for the Image Check result page.

Sends the local scores plus the raw answers to Claude and gets back a
persona id and the narrative sections of the report.

The persona id comes back as free text. It is never trusted as-is:
every report, AI or fallback, passes through normalize_persona_id.

When the API is unavailable (no key, bad key, rate limit, network, bad
JSON) `diagnose` hands back the deterministic fallback report built from
compute_fallback_persona, together with the error that caused it.
"""

import json
import logging
import time

import requests

from core import config
from core.questionnaire import QUESTIONS, COMPLEXION, HAIR, STYLING, SOCIAL, answer_label
from core.scoring import compute_fallback_persona, normalize_persona_id
from core.personas import PERSONA_IDS

logger = logging.getLogger(__name__)

_API_URL = "https://api.anthropic.com/v1/messages"
_HEADERS = {
    "Content-Type": "application/json",
    "anthropic-version": "2023-06-01",
}

NARRATIVE_FIELDS = [
    "persona_explanation",
    "persona_overview",
    "skin_analysis",
    "hair_analysis",
    "style_analysis",
    "social_analysis",
    "coach_general_advice",
]

CATEGORY_FIELDS = {
    COMPLEXION: "skin_analysis",
    HAIR:       "hair_analysis",
    STYLING:    "style_analysis",
    SOCIAL:     "social_analysis",
}


class NarratorError(RuntimeError):
    """The narrator could not produce a report.

    `reason` is one of: missing_key, invalid_key, rate_limited,
    unavailable, bad_response.
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


# ── System prompt ─────────────────────────────────────────────────────────────
_SYSTEM_PROMPT = """You are a warm, experienced men's image coach. You are reviewing
the results of a 20-question self-assessment taken by a man aged 25-35.

Speak directly to him in the second person. Be precise about the problem, never
mocking or harsh: frame every weakness as potential that is currently blocked.
Mark the key advice with **double asterisks** so it can be highlighted.

You must return ONLY a valid JSON object with exactly these fields:
{
  "selected_persona_id": "<one of: charmer, statue, hustler, neighbor, sage, pioneer>",
  "persona_explanation": "<why he fits this persona, citing his actual answers, ~150 words>",
  "persona_overview": "<one sentence summarising where he is now>",
  "skin_analysis": "<advice for Complexion, ~50 words>",
  "hair_analysis": "<advice for Hair, ~50 words>",
  "style_analysis": "<advice for Styling, ~50 words>",
  "social_analysis": "<advice for Social Presence, ~50 words>",
  "coach_general_advice": "<closing strategy in 2-3 paragraphs separated by blank lines, ~200 words>"
}

Return ONLY the JSON. No preamble, no markdown fences."""


_PERSONA_MATRIX = """Persona decision matrix (check in this order, avoid defaulting to neighbor):

1. sage [check first]: knows but does not act. High agreement on knowledge questions
   ("I know...", "I understand...") but low agreement on habit questions
   ("I have a fixed...", "I regularly...", "I can recreate...").
2. statue: good from afar, falls apart up close. Styling or Hair is Green or high
   Yellow, but Complexion is Red.
3. hustler: trying too hard. Styling is not low but the style-system or shopping
   questions are; or the total is middling while Social Presence is very low.
4. charmer: total above 48 and no Red category. Nearly every answer is "Strongly agree".
5. pioneer: total below 24, or 3 or more Red categories.
6. neighbor [default]: none of the above. Scores are even, no standout high or
   fatal low, answers mostly in the middle of the scale."""


def build_prompt(summary: dict, answers: dict, name: str = "") -> str:
    """User message with the scores, the per-question answers and the persona matrix."""
    scores = [
        {"category": r["category"], "score": r["score"], "max": r["max_score"], "level": r["level"]}
        for r in summary["summary"]
    ]
    max_total = sum(r["max_score"] for r in summary["summary"])
    detailed = [
        {"category": q["category"], "question": q["text"], "answer": answer_label(answers, q["id"])}
        for q in QUESTIONS
    ]

    return f"""Assessment results:
1. Total score: {summary['total_score']}/{max_total} ({len(scores)} categories)
2. Category scores: {json.dumps(scores)}
3. Answers: {json.dumps(detailed)}
4. Name: {name or 'you'}

{_PERSONA_MATRIX}

Pick the persona that fits best and write the report as the JSON object specified."""


def _call_claude(system_prompt: str, user_prompt: str, api_key: str) -> str:
    """Make a single call to the Anthropic Messages API and return the text."""
    payload = {
        "model": config.NARRATOR_MODEL,
        "max_tokens": config.NARRATOR_MAX_TOKENS,
        "system": system_prompt,
        "messages": [{"role": "user", "content": user_prompt}],
    }
    headers = dict(_HEADERS, **{"x-api-key": api_key})
    resp = requests.post(_API_URL, headers=headers, json=payload, timeout=config.NARRATOR_TIMEOUT)
    resp.raise_for_status()
    data = resp.json()
    return data["content"][0]["text"].strip()


def _strip_fences(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("```")[1]
        if raw.startswith("json"):
            raw = raw[4:]
    return raw.strip()


def generate_report(summary: dict, answers: dict, api_key: str, name: str = "") -> dict:
    """
    Ask Claude for the narrative report.

    Returns
    -------
    dict with selected_persona_id (normalized), the NARRATIVE_FIELDS and
    source="ai".

    Raises
    ------
    NarratorError on any failure; the caller decides whether to fall back.
    """
    if not api_key:
        raise NarratorError("missing_key", "No API key configured")

    try:
        raw = _call_claude(_SYSTEM_PROMPT, build_prompt(summary, answers, name), api_key)
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        if status in (400, 401, 403):
            raise NarratorError("invalid_key", f"API key rejected (HTTP {status})") from e
        if status == 429:
            raise NarratorError("rate_limited", "Too many requests (HTTP 429)") from e
        raise NarratorError("unavailable", f"API HTTP error {status}") from e
    except requests.RequestException as e:
        raise NarratorError("unavailable", f"Could not reach the API: {str(e)[:120]}") from e
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise NarratorError("bad_response", f"Unexpected API response shape: {e}") from e

    if not raw:
        raise NarratorError("bad_response", "Empty response from the API")
    try:
        parsed = json.loads(_strip_fences(raw))
    except json.JSONDecodeError as e:
        raise NarratorError("bad_response", f"Could not parse response as JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise NarratorError("bad_response", "Response JSON is not an object")

    report = {"selected_persona_id": normalize_persona_id(parsed.get("selected_persona_id"), PERSONA_IDS)}
    for field in NARRATIVE_FIELDS:
        value = parsed.get(field)
        report[field] = str(value) if value is not None else ""
    report["source"] = "ai"
    return report


def fallback_report(summary: dict, forced: bool = False) -> dict:
    """Report built purely from the local scores."""
    if forced:
        explanation = ("⚠️ This is the **basic analysis mode** report. The AI service is not "
                       "reachable right now, so your result is based on your score band.")
    else:
        explanation = "⚠️ The AI service is busy. This basic report is generated from your scores."

    return {
        "selected_persona_id": normalize_persona_id(compute_fallback_persona(summary), PERSONA_IDS),
        "persona_explanation": explanation,
        "persona_overview": "Your potential is big. Refresh the page later for the full analysis.",
        "skin_analysis": "Skincare is the foundation. Build a daily routine you can stick to.",
        "hair_analysis": "Your haircut sets the first impression. Find a stylist who fits you.",
        "style_analysis": "Dressing well takes a strategy. Focus on fit and proportion first.",
        "social_analysis": "Your social profiles are your personal brand. Curate them.",
        "coach_general_advice": ("This is a basic strategy report. Use the radar chart and the "
                                 "category cards above as your starting point. For the **full AI "
                                 "analysis**, please try again later."),
        "source": "fallback",
    }


def diagnose(summary: dict, answers: dict, api_key: str, name: str = "",
             force_fallback: bool = False) -> tuple:
    """
    Produce a report, falling back to the local rules when needed.

    Returns
    -------
    (report, error)  where error is None or the NarratorError that forced
                     the fallback.
    """
    if force_fallback:
        logger.info("Narrator bypassed, using fallback persona")
        return fallback_report(summary, forced=True), None

    try:
        return generate_report(summary, answers, api_key, name), None
    except NarratorError as e:
        logger.warning("Narrator failed (%s): %s", e.reason, e)
        return fallback_report(summary), e


def analysis_for_category(report: dict, category: str) -> str:
    if not report:
        return "Analysing..."
    return report.get(CATEGORY_FIELDS.get(category, ""), "")


class CooldownGuard:
    """
    Blocks duplicate narrator calls: one in flight at a time, and none
    within `seconds` of the previous start.
    """

    def __init__(self, seconds: float = None):
        self.seconds = config.NARRATOR_COOLDOWN_SECONDS if seconds is None else seconds
        self.in_flight = False
        self.last_started = None

    def allow(self, now: float = None, bypass: bool = False) -> bool:
        now = time.monotonic() if now is None else now
        if not bypass:
            if self.in_flight:
                return False
            if self.last_started is not None and now - self.last_started < self.seconds:
                logger.debug("Narrator call blocked by cooldown")
                return False
        self.in_flight = True
        self.last_started = now
        return True

    def release(self):
        self.in_flight = False

    def reset(self):
        self.in_flight = False
        self.last_started = None
