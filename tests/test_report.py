"""Tests for the presentation/export boundary: highlights, payload, chart, CSV."""

import matplotlib.pyplot as plt

from core.narrator import fallback_report
from core.report import (
    build_report_payload, highlight_html, radar_figure, split_highlights, summary_frame,
)
from core.scoring import compute_summary
from tests.conftest import make_answers


class TestHighlights:
    def test_split(self):
        assert split_highlights("a **b** c") == [("a ", False), ("b", True), (" c", False)]

    def test_split_empty(self):
        assert split_highlights("") == []
        assert split_highlights(None) == []

    def test_html(self):
        html = highlight_html("Go **now**\nplease", color="#000")
        assert '<span style="color: #000; font-weight: bold;">now</span>' in html
        assert "<br/>please" in html

    def test_html_empty(self):
        assert highlight_html("") == ""


class TestBuildReportPayload:
    def test_totals_match_summary(self):
        summary = compute_summary(make_answers(3))
        payload = build_report_payload(summary, fallback_report(summary), "Alex", "a@b.co",
                                       submitted_at="2026-01-01T00:00:00+00:00")
        assert payload["total_score"] == 60
        assert payload["quiz_result"]["total_score"] == 60
        assert sum(v["score"] for v in payload["quiz_result"]["scores"].values()) == 60
        assert payload["submitted_at"] == "2026-01-01T00:00:00+00:00"
        assert payload["email"] == "a@b.co"

    def test_persona_details(self):
        summary = compute_summary({})
        payload = build_report_payload(summary, fallback_report(summary))
        result = payload["quiz_result"]
        assert result["persona_id"] == "pioneer"
        assert result["persona_title"] == "The Fresh Start"
        assert result["source"] == "fallback"
        assert payload["name"] == "you"

    def test_untrusted_persona_id_is_normalized(self):
        summary = compute_summary({})
        payload = build_report_payload(summary, {"selected_persona_id": " Hacker "})
        assert payload["quiz_result"]["persona_id"] == "neighbor"

    def test_score_keys(self):
        summary = compute_summary({})
        payload = build_report_payload(summary, fallback_report(summary))
        assert set(payload["quiz_result"]["scores"]) == {"skin", "hair", "style", "social"}

    def test_overview_defaults_to_subtitle(self):
        summary = compute_summary({})
        payload = build_report_payload(summary, {"selected_persona_id": "sage", "persona_overview": ""})
        assert "Knows it all" in payload["ai_analysis"]["overview"]


class TestExports:
    def test_summary_frame(self):
        frame = summary_frame(compute_summary(make_answers(2)))
        assert list(frame.columns) == ["Category", "Score", "Max", "Level", "Suggestion"]
        assert frame["Score"].sum() == 40
        assert len(frame) == 4

    def test_radar_figure(self):
        fig = radar_figure(compute_summary(make_answers(2)))
        try:
            ax = fig.axes[0]
            assert ax.name == "polar"
            assert "40 / 60" in ax.get_title()
        finally:
            plt.close(fig)
