# core/report.py
"""
Everything downstream of the scores: radar chart, highlighted copy,
the outbound report payload and the CSV/JSON exports.

Only the Summary (from core/scoring.py) and the persona id leave the
engine; nothing here recomputes scores.
"""

from datetime import datetime, timezone
from math import pi

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from core.questionnaire import COMPLEXION, HAIR, STYLING, SOCIAL
from core.personas import get_persona

BRAND_GOLD = "#edae26"
QUIZ_SOURCE = "image-check"

# Payload keys for each category (what the email template expects)
PAYLOAD_KEYS = {
    COMPLEXION: "skin",
    HAIR:       "hair",
    STYLING:    "style",
    SOCIAL:     "social",
}


# ── Highlight markup (**text**) ──────────────────────────────────────────────

def split_highlights(text: str) -> list:
    """Split on ** into [(segment, is_highlight), ...]; odd segments are highlighted."""
    if not text:
        return []
    return [(part, i % 2 == 1) for i, part in enumerate(text.split("**")) if part]


def highlight_html(text: str, color: str = BRAND_GOLD) -> str:
    """Newlines → <br/>, **x** → coloured bold span."""
    if not text:
        return ""
    html = text.replace("\n", "<br/>")
    parts = []
    for i, part in enumerate(html.split("**")):
        if i % 2 == 1:
            parts.append(f'<span style="color: {color}; font-weight: bold;">{part}</span>')
        else:
            parts.append(f"<span>{part}</span>")
    return "".join(parts)


# ── Radar chart ───────────────────────────────────────────────────────────────

def radar_figure(summary: dict, figsize=(6, 6)):
    """Polar plot of the category scores, 0 → category max. Caller closes the figure."""
    results = summary["summary"]
    cats    = [r["category"] for r in results]
    scores  = [r["score"] for r in results]
    top     = max([r["max_score"] for r in results] or [1])

    N = len(cats)
    angles = [n / float(N) * 2 * pi for n in range(N)] + [0]
    sp = scores + scores[:1]

    fig, ax = plt.subplots(figsize=figsize, subplot_kw=dict(polar=True))
    ax.set_facecolor("#ffffff"); fig.patch.set_facecolor("#ffffff")
    rings = np.linspace(0, top, 4)[1:]
    for rv in rings:
        ax.plot(angles, [rv] * (N + 1), color="#cccccc", linewidth=0.5, linestyle="--")
    ax.fill(angles, sp, color="#2563eb", alpha=0.25)
    ax.plot(angles, sp, color="#2563eb", linewidth=2.5)
    ax.scatter(angles[:-1], scores, color=[r["color"] for r in results], s=60, zorder=5)
    ax.set_xticks(angles[:-1])
    ax.set_xticklabels(cats, fontsize=10, color="#1e293b", fontweight="bold")
    ax.set_yticks(rings)
    ax.set_yticklabels([f"{int(round(rv))}" for rv in rings], fontsize=7, color="#888")
    ax.set_ylim(0, top)
    max_total = sum(r["max_score"] for r in results)
    ax.set_title(f"Image score  {summary['total_score']} / {max_total}",
                 fontsize=12, pad=20, color="#1e293b", fontweight="bold")
    return fig


# ── Tables / exports ──────────────────────────────────────────────────────────

def summary_frame(summary: dict) -> pd.DataFrame:
    rows = [{"Category": r["category"], "Score": r["score"], "Max": r["max_score"],
             "Level": r["level"], "Suggestion": r["suggestion"]} for r in summary["summary"]]
    return pd.DataFrame(rows, columns=["Category", "Score", "Max", "Level", "Suggestion"])


def build_report_payload(summary: dict, report: dict, name: str = "", email: str = "",
                         submitted_at: str = None) -> dict:
    """
    Outbound report for the marketing follow-up (email template / CRM).

    Narrative fields are pre-rendered to HTML with the brand highlight
    colour. The payload is only built here, never sent.
    """
    persona = get_persona(report.get("selected_persona_id"))
    submitted_at = submitted_at or datetime.now(timezone.utc).isoformat()

    scores = {}
    for r in summary["summary"]:
        key = PAYLOAD_KEYS.get(r["category"], r["category"].lower())
        scores[key] = {"score": r["score"], "max_score": r["max_score"],
                       "level": r["level"], "suggestion": r["suggestion"]}

    return {
        "submitted_at": submitted_at,
        "quiz_source":  QUIZ_SOURCE,
        "name":         name or "you",
        "email":        email,
        "total_score":  summary["total_score"],
        "quiz_result": {
            "total_score":      summary["total_score"],
            "persona_id":       persona["id"],
            "persona_title":    persona["title"],
            "persona_subtitle": persona["subtitle"],
            "tags":             list(persona["tags"]),
            "source":           report.get("source", ""),
            "scores":           scores,
        },
        "ai_analysis": {
            "overview":          highlight_html(report.get("persona_overview") or persona["subtitle"]),
            "explanation":       highlight_html(report.get("persona_explanation", "")),
            "advice_appearance": highlight_html(report.get("skin_analysis", "")),
            "advice_hair":       highlight_html(report.get("hair_analysis", "")),
            "advice_style":      highlight_html(report.get("style_analysis", "")),
            "advice_social":     highlight_html(report.get("social_analysis", "")),
            "coach_summary":     highlight_html(report.get("coach_general_advice", "")),
        },
    }
