# core/questionnaire.py
"""
The 20 Image Check questions, 5 per category, plus the shared answer scale.

SCORING SCALE
─────────────
Every question uses the same five options.
  3 → Strongly agree      2 → Somewhat agree
  1 → Somewhat disagree   0 → Not at all
 -1 → Not sure            (sentinel, scored as 0)

Each category therefore tops out at 5 × 3 = 15 points, 60 overall.
"""

# ── Categories (fixed display order) ─────────────────────────────────────────
COMPLEXION = "Complexion"
HAIR       = "Hair"
STYLING    = "Styling"
SOCIAL     = "Social Presence"

CATEGORIES = [COMPLEXION, HAIR, STYLING, SOCIAL]

QUESTIONS_PER_CATEGORY = 5

# ── Answer scale ─────────────────────────────────────────────────────────────
UNSURE_VALUE = -1

OPTIONS = [
    {"value": 3,  "label": "Strongly agree"},
    {"value": 2,  "label": "Somewhat agree"},
    {"value": 1,  "label": "Somewhat disagree"},
    {"value": 0,  "label": "Not at all"},
    {"value": UNSURE_VALUE, "label": "Not sure"},
]

MAX_OPTION_VALUE = max(o["value"] for o in OPTIONS)

# ── Category copy (intro screens + per-level suggestions) ────────────────────
CATEGORY_INFO = {
    COMPLEXION: {
        "description": "Skin, grooming and the details people notice up close.",
        "suggestions": {
            "Green":  "Your daily routine is solid. Keep it consistent and refine the small details.",
            "Yellow": "The basics are there, but the routine slips. Build a fixed morning and night SOP.",
            "Red":    "Start with cleansing, moisturising and sunscreen every day before anything else.",
        },
    },
    HAIR: {
        "description": "How well your haircut suits you and whether you can style it yourself.",
        "suggestions": {
            "Green":  "You own your hairstyle. Review the cut with your stylist every season.",
            "Yellow": "The cut works on salon day only. Learn a five-minute styling routine you can repeat.",
            "Red":    "Find a stylist who designs for your face shape and ask them to teach you how to style it.",
        },
    },
    STYLING: {
        "description": "Fit, colour and the logic behind what you buy and wear.",
        "suggestions": {
            "Green":  "You dress with intent. Start curating a signature look around your best pieces.",
            "Yellow": "Some outfits land, some don't. Focus on fit first and cut the impulse buys.",
            "Red":    "Build a small capsule of well-fitting basics before adding statement pieces.",
        },
    },
    SOCIAL: {
        "description": "What your photos and profiles say about you before you ever meet.",
        "suggestions": {
            "Green":  "Your profiles tell a clear story. Keep them current and on-brand.",
            "Yellow": "Your profiles are fine but forgettable. Replace weak photos and sharpen the bio.",
            "Red":    "Your online image is holding you back. Start with one good portrait and a clean profile.",
        },
    },
}

# ── 20 Questions ─────────────────────────────────────────────────────────────
QUESTIONS = [
    # ── Complexion ───────────────────────────────────────────────────────────
    {"id": 1,  "category": COMPLEXION, "text": "I know my skin type and which products suit it."},
    {"id": 2,  "category": COMPLEXION, "text": "I have a fixed skincare routine that I follow morning and night."},
    {"id": 3,  "category": COMPLEXION, "text": "I use sunscreen regularly, even on cloudy days."},
    {"id": 4,  "category": COMPLEXION, "text": "I keep my eyebrows, nose hair and stubble neatly groomed."},
    {"id": 5,  "category": COMPLEXION, "text": "People tell me I look well rested and healthy."},

    # ── Hair ─────────────────────────────────────────────────────────────────
    {"id": 6,  "category": HAIR, "text": "I know which hairstyles suit my face shape."},
    {"id": 7,  "category": HAIR, "text": "I have a stylist I trust and go back to regularly."},
    {"id": 8,  "category": HAIR, "text": "I can recreate the salon look at home on my own."},
    {"id": 9,  "category": HAIR, "text": "I use styling products and know how much to apply."},
    {"id": 10, "category": HAIR, "text": "I get my hair cut on a fixed schedule before it grows out."},

    # ── Styling ──────────────────────────────────────────────────────────────
    {"id": 11, "category": STYLING, "text": "I know which cuts and fits flatter my body type."},
    {"id": 12, "category": STYLING, "text": "I understand which colours work with my skin tone."},
    {"id": 13, "category": STYLING, "text": "My wardrobe follows a consistent personal style."},
    {"id": 14, "category": STYLING, "text": "I plan purchases around what I already own instead of buying on impulse."},
    {"id": 15, "category": STYLING, "text": "I dress differently for work, dates and casual occasions."},

    # ── Social Presence ──────────────────────────────────────────────────────
    {"id": 16, "category": SOCIAL, "text": "I have recent photos of myself that I am happy to show."},
    {"id": 17, "category": SOCIAL, "text": "My profile picture shows my face clearly and in good light."},
    {"id": 18, "category": SOCIAL, "text": "I know what impression my social profiles give to strangers."},
    {"id": 19, "category": SOCIAL, "text": "I regularly post content that reflects my lifestyle and interests."},
    {"id": 20, "category": SOCIAL, "text": "My dating and social profiles tell a consistent story about me."},
]


# ══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════════════════════

def questions_in(category: str, questions: list = None) -> list:
    """Questions of a single category, in question-bank order."""
    questions = QUESTIONS if questions is None else questions
    return [q for q in questions if q["category"] == category]


def answer_label(answers: dict, question_id: int) -> str:
    value = answers.get(question_id)
    for o in OPTIONS:
        if o["value"] == value:
            return o["label"]
    return "Unanswered"


# ══════════════════════════════════════════════════════════════════════════════
# STARTUP VALIDATION
# ══════════════════════════════════════════════════════════════════════════════

class QuestionBankError(ValueError):
    """The question bank is malformed; level thresholds would be meaningless."""


def validate_question_bank(questions: list = None, categories: list = None,
                           options: list = None) -> None:
    """
    Check the question bank once at startup.

    Raises QuestionBankError when:
      - a question id appears twice
      - a question names a category outside `categories`
      - categories hold different numbers of questions (or none at all)
      - the option list has no "Not sure" sentinel
    """
    questions  = QUESTIONS if questions is None else questions
    categories = CATEGORIES if categories is None else categories
    options    = OPTIONS if options is None else options

    seen = set()
    for q in questions:
        if q["id"] in seen:
            raise QuestionBankError(f"Duplicate question id {q['id']}")
        seen.add(q["id"])
        if q["category"] not in categories:
            raise QuestionBankError(f"Question {q['id']} has unknown category {q['category']!r}")

    sizes = {cat: len(questions_in(cat, questions)) for cat in categories}
    if len(set(sizes.values())) != 1 or 0 in sizes.values():
        raise QuestionBankError(f"Categories must hold the same number of questions, got {sizes}")

    if not any(o["value"] == UNSURE_VALUE for o in options):
        raise QuestionBankError("Option list is missing the 'Not sure' sentinel")
