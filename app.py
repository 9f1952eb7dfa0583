# app.py  –  Image Check quiz funnel
# Run:  streamlit run app.py

import streamlit as st
import os
import sys
import json
import logging
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

sys.path.insert(0, os.path.dirname(__file__))

from core import config
from core import funnel
from core.questionnaire import (
    QUESTIONS, OPTIONS, CATEGORY_INFO, validate_question_bank,
)
from core.scoring import compute_summary
from core.personas import get_persona
from core.narrator import diagnose, analysis_for_category, CooldownGuard
from core.report import radar_figure, split_highlights, summary_frame, build_report_payload

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

validate_question_bank()

# ── Page config ──────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Image Check – What is holding your look back?",
    page_icon="✨",
    layout="centered",
)

st.markdown("""
<style>
.header-strip {
    background: linear-gradient(90deg,#0f172a,#1e293b);
    color: #ffffff !important;
    padding: 16px 24px; border-radius: 8px; margin-bottom: 20px;
}
.header-strip h2, .header-strip p { color: #ffffff !important; }
.q-card {
    background: #f8fafc; border: 2px solid #e2e8f0;
    border-radius: 16px; padding: 20px 24px; margin: 12px 0;
    color: #1e293b !important;
}
.q-card * { color: #1e293b !important; }
.dim-card {
    background: #ffffff; border-left: 6px solid #94a3b8;
    padding: 12px 16px; border-radius: 8px; margin-bottom: 10px;
    color: #1a1a1a !important;
}
.dim-card * { color: #1a1a1a !important; }
.level-chip {
    float: right; font-size: 0.8rem; font-weight: 700;
    padding: 2px 10px; border-radius: 99px; color: #ffffff !important;
}
.persona-card {
    background: #0f172a; color: #ffffff !important;
    border-radius: 16px; padding: 20px 24px; margin-bottom: 16px;
}
.persona-card * { color: #ffffff !important; }
.tag { display: inline-block; background: #1e293b; border-radius: 99px;
       padding: 2px 10px; margin: 2px 4px 2px 0; font-size: 0.8rem; }
.hl { color: #edae26 !important; font-weight: 800; }
</style>""", unsafe_allow_html=True)


# ── Helpers ──────────────────────────────────────────────────────────────────
def init_state():
    if "funnel" not in st.session_state:
        params = {k: st.query_params.get(k) for k in ("start", "email")}
        st.session_state.funnel = funnel.state_from_query(params)
    if "guard" not in st.session_state:
        st.session_state.guard = CooldownGuard()
    if "api_key" not in st.session_state:
        st.session_state.api_key = ""

init_state()

def _state():
    return st.session_state.funnel

def _go(new_state):
    st.session_state.funnel = new_state
    st.rerun()

def _rich(text):
    """Render **highlights** in the brand colour."""
    out = []
    for part, hl in split_highlights(text):
        part = part.replace("\n", "<br>")
        out.append(f"<span class='hl'>{part}</span>" if hl else part)
    return "".join(out)

def _run_diagnosis(force_fallback=False, override_key=""):
    s = _state()
    guard = st.session_state.guard
    if not guard.allow(bypass=force_fallback or bool(override_key)):
        return
    try:
        summary = compute_summary(s["answers"])
        api_key = override_key or st.session_state.api_key or config.ANTHROPIC_API_KEY
        report, error = diagnose(summary, s["answers"], api_key,
                                 name=s["name"], force_fallback=force_fallback)
    finally:
        guard.release()
    st.session_state.funnel = funnel.finish_diagnosis(s, report, error)


# ── Sidebar ──────────────────────────────────────────────────────────────────
with st.sidebar:
    st.markdown("## ✨ Image Check")
    st.markdown("*20 questions · 4 dimensions · 1 persona*")
    st.divider()
    s = _state()
    cur_i = funnel.STEPS.index(s["step"])
    for step, label in [(funnel.HERO, "Welcome"), (funnel.QUIZ, "Questions"),
                        (funnel.DIAGNOSING, "Analysis"), (funnel.RESULT, "Your Report")]:
        cur = s["step"] == step
        done = cur_i > funnel.STEPS.index(step)
        icon = "✅" if done else ("▶️" if cur else "○")
        st.markdown(f"{icon} **{label}**" if cur else f"{icon} {label}")
    if s["step"] == funnel.QUIZ:
        st.divider()
        st.progress(funnel.progress(s))
        st.caption(f"{len(s['answers'])} / {len(QUESTIONS)} answered")
    if s["step"] != funnel.HERO:
        st.divider()
        if st.button("🔄 Start Over", use_container_width=True):
            st.session_state.guard.reset()
            _go(funnel.restart(s))


# ══════════════════════════════════════════════════════════════════════════════
# HERO
# ══════════════════════════════════════════════════════════════════════════════
s = _state()
if s["step"] == funnel.HERO:
    st.markdown("""
    <div class='header-strip'>
        <h2 style='margin:0;'>✨ Image Check</h2>
        <p style='margin:4px 0 0;color:#cbd5e1;'>Built for men aged 25-35. Find the blind spots that keep your charm hidden.</p>
    </div>""", unsafe_allow_html=True)
    c1, c2, c3 = st.columns(3)
    c1.markdown("**✨ Your persona**  \nFind your natural archetype")
    c2.markdown("**📐 Four dimensions**  \nSkin · hair · style · social")
    c3.markdown("**🕴️ Coach advice**  \nA personal upgrade strategy")
    st.divider()
    if st.button("▶️ Start the check →", type="primary", use_container_width=True):
        st.session_state.guard.reset()
        _go(funnel.start(s))


# ══════════════════════════════════════════════════════════════════════════════
# QUIZ
# ══════════════════════════════════════════════════════════════════════════════
elif s["step"] == funnel.QUIZ:
    q = funnel.current_question(s)
    st.caption(f"{q['category']} · Question {s['current_idx'] + 1} / {len(QUESTIONS)}")
    st.progress(funnel.progress(s))

    if s["intro_mode"]:
        st.markdown(f"""
        <div class='q-card'>
            <div style='font-size:1.6rem;font-weight:800;'>{q['category']}</div>
            <div style='font-size:1.05rem;margin-top:8px;'>{CATEGORY_INFO[q['category']]['description']}</div>
        </div>""", unsafe_allow_html=True)
        b1, b2 = st.columns(2)
        with b1:
            if st.button("← Back", use_container_width=True, key=f"ib_{s['current_idx']}"):
                _go(funnel.previous_step(s))
        with b2:
            if st.button("Continue →", type="primary", use_container_width=True, key=f"in_{s['current_idx']}"):
                _go(funnel.next_step(s))
        st.stop()

    st.markdown(f"<div class='q-card'><div style='font-size:1.2rem;font-weight:700;'>{q['text']}</div></div>",
                unsafe_allow_html=True)
    chosen = s["answers"].get(q["id"])
    for opt in OPTIONS:
        selected = chosen == opt["value"]
        if st.button(("● " if selected else "") + opt["label"], type="primary" if selected else "secondary",
                     use_container_width=True, key=f"opt_{q['id']}_{opt['value']}"):
            _go(funnel.answer(s, opt["value"]))
    st.markdown("")
    if st.button("← Previous", key=f"prev_{q['id']}"):
        _go(funnel.previous_step(s))


# ══════════════════════════════════════════════════════════════════════════════
# DIAGNOSING
# ══════════════════════════════════════════════════════════════════════════════
elif s["step"] == funnel.DIAGNOSING:
    st.markdown("""
    <div class='header-strip'>
        <h2 style='margin:0;'>🔍 Analysing your answers…</h2>
        <p style='margin:4px 0 0;color:#cbd5e1;'>Your coach is reading through all 20 answers.</p>
    </div>""", unsafe_allow_html=True)
    with st.spinner("Building your personal report…"):
        _run_diagnosis()
    if _state()["step"] == funnel.RESULT:
        st.rerun()
    st.info("Analysis already running, please wait a moment.")
    if st.button("Show the basic report now"):
        _run_diagnosis(force_fallback=True)
        st.rerun()


# ══════════════════════════════════════════════════════════════════════════════
# RESULT
# ══════════════════════════════════════════════════════════════════════════════
elif s["step"] == funnel.RESULT:
    summary = compute_summary(s["answers"])
    report = s["report"]
    persona = get_persona(report["selected_persona_id"])
    error = s["diagnosis_error"]

    if error is not None:
        st.warning(f"⚠️ AI analysis unavailable ({error.reason}). Showing the basic report from your scores.")
        if error.reason in ("missing_key", "invalid_key", "rate_limited"):
            with st.expander("🔑 Use your own API key", expanded=error.reason != "rate_limited"):
                key = st.text_input("Anthropic API key", type="password")
                if st.button("Retry with this key") and key:
                    st.session_state.api_key = key
                    st.session_state.funnel = dict(s, step=funnel.DIAGNOSING)
                    _run_diagnosis(override_key=key)
                    st.rerun()

    tags = "".join(f"<span class='tag'>#{t}</span>" for t in persona["tags"])
    st.markdown(f"""
    <div class='persona-card'>
        <div style='font-size:0.75rem;letter-spacing:0.1em;'>PERSONA</div>
        <div style='font-size:2rem;font-weight:900;'>{persona['title']}</div>
        <div style='font-size:1.05rem;margin:6px 0 10px;'>{_rich(report['persona_overview'] or persona['subtitle'])}</div>
        {tags}
    </div>""", unsafe_allow_html=True)
    st.markdown(_rich(report["persona_explanation"]), unsafe_allow_html=True)

    st.divider()
    fig = radar_figure(summary)
    st.pyplot(fig)
    plt.close(fig)

    st.divider()
    st.markdown("## 📐 Your four dimensions")
    if not s["unlocked"]:
        st.info("Enter your email to unlock the full breakdown and get the report in your inbox.")
        with st.form("email_capture"):
            name = st.text_input("First name")
            email = st.text_input("Email")
            if st.form_submit_button("🔓 Unlock my report", type="primary") and email.strip():
                logger.info("Email captured for persona %s", persona["id"])
                _go(funnel.unlock(s, email, name))
    else:
        for r in summary["summary"]:
            st.markdown(f"""
            <div class='dim-card' style='border-left-color:{r['color']};'>
                <span class='level-chip' style='background:{r['color']};'>{r['level']} ({r['score']}/{r['max_score']})</span>
                <b>{r['category']}</b><br>
                <small>{r['description']}</small><br><br>
                {_rich(analysis_for_category(report, r['category']))}<br>
                <small><i>{r['suggestion']}</i></small>
            </div>""", unsafe_allow_html=True)

        st.divider()
        st.markdown("## 🕴️ Coach's strategy")
        st.markdown(_rich(report["coach_general_advice"]), unsafe_allow_html=True)

        payload = build_report_payload(summary, report, name=s["name"], email=s["email"])
        d1, d2 = st.columns(2)
        with d1:
            st.download_button("📥 Download Report (JSON)", data=json.dumps(payload, indent=2),
                               file_name="image_check_report.json", mime="application/json",
                               use_container_width=True)
        with d2:
            st.download_button("📥 Download Scores (CSV)", data=summary_frame(summary).to_csv(index=False),
                               file_name="image_check_scores.csv", mime="text/csv",
                               use_container_width=True)

        if config.SALES_PAGE_URL:
            st.divider()
            st.markdown("### 🚀 The 3-day image rescue plan")
            st.markdown("Knowing the problem is not the same as fixing it. Get a step-by-step "
                        "system you can apply right away.")
            st.link_button("See the plan →", config.SALES_PAGE_URL, type="primary", use_container_width=True)

    st.divider()
    if st.button("🔄 Take the check again"):
        st.session_state.guard.reset()
        _go(funnel.start(s))
