# core/personas.py
"""
The six persona archetypes a result can land on.

Either the AI narrator picks one, or the rule-based fallback in
core/scoring.py does. Both go through normalize_persona_id first.
"""

PERSONAS = [
    {
        "id": "charmer",
        "title": "The All-Round Charmer",
        "subtitle": "Polished from every angle",
        "tags": ["Consistent routine", "Confident style", "Strong first impression"],
    },
    {
        "id": "statue",
        "title": "The Unfinished Statue",
        "subtitle": "Great from afar, loses it up close",
        "tags": ["Good outfits", "Neglected details", "Skin needs work"],
    },
    {
        "id": "hustler",
        "title": "The Lost Stylist",
        "subtitle": "Trying hard, missing the system",
        "tags": ["Impulse buys", "No signature look", "Underused profiles"],
    },
    {
        "id": "neighbor",
        "title": "The Clean Guy Next Door",
        "subtitle": "Nothing wrong, nothing memorable",
        "tags": ["Safe choices", "Balanced scores", "Untapped potential"],
    },
    {
        "id": "sage",
        "title": "The Theory Expert",
        "subtitle": "Knows it all, does none of it",
        "tags": ["Strong knowledge", "Weak habits", "Needs a routine"],
    },
    {
        "id": "pioneer",
        "title": "The Fresh Start",
        "subtitle": "A blank canvas ready for a rebuild",
        "tags": ["Starting point", "Big upside", "Needs fundamentals"],
    },
]

PERSONA_IDS = [p["id"] for p in PERSONAS]

DEFAULT_PERSONA_ID = "neighbor"

_BY_ID = {p["id"]: p for p in PERSONAS}


def get_persona(persona_id) -> dict:
    """Persona dict for an id from either path; unknown ids get the default persona."""
    from core.scoring import normalize_persona_id

    return _BY_ID[normalize_persona_id(persona_id, PERSONA_IDS, DEFAULT_PERSONA_ID)]
