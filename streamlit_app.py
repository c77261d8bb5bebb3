"""Main Streamlit UI for PREMO Intelligence.

A mock login gates a movie-project form; submitting it asks the configured
model for a box-office forecast and renders the result dashboard.
- Live mode calls the configured API endpoint.
- Demo mode returns a deterministic offline forecast.
"""

from __future__ import annotations

import html
import os
import sys
import time
from pathlib import Path
from typing import Any, Sequence

import streamlit as st
from dotenv import load_dotenv

# Ensure backend package is importable when running `streamlit run streamlit_app.py`.
ROOT = Path(__file__).resolve().parent
BACKEND_ROOT = ROOT / "backend"
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
load_dotenv(ROOT / ".env", override=False)

SECRET_ENV_KEYS = (
    "PREMO_API_KEY",
    "PREMO_BASE_URL",
    "PREMO_MODEL",
    "PREMO_TEMPERATURE",
    "PREMO_LOG_LEVEL",
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
)


def _hydrate_env_from_streamlit_secrets() -> None:
    """Load PREMO config from Streamlit Secrets into env when not already set."""
    try:
        secrets = st.secrets.to_dict()
    except Exception:
        # No secrets.toml: local runs rely on the environment and `.env`.
        return

    premo_block = secrets.get("premo")
    if isinstance(premo_block, dict):
        mapping = {
            "api_key": "PREMO_API_KEY",
            "base_url": "PREMO_BASE_URL",
            "model": "PREMO_MODEL",
            "temperature": "PREMO_TEMPERATURE",
            "log_level": "PREMO_LOG_LEVEL",
        }
        for secret_key, env_key in mapping.items():
            value = premo_block.get(secret_key)
            if value is not None and str(value).strip() and not os.getenv(env_key):
                os.environ[env_key] = str(value).strip()

    for key in SECRET_ENV_KEYS:
        value = secrets.get(key)
        if isinstance(value, str) and value.strip() and not os.getenv(key):
            os.environ[key] = value.strip()


_hydrate_env_from_streamlit_secrets()

from premo.app import create_app  # noqa: E402
from premo.flow import ProjectFlow  # noqa: E402
from premo.models import MovieInput, PredictionResult, SuccessLevel  # noqa: E402
from premo.report import prediction_json, prediction_markdown, report_slug  # noqa: E402
from premo.session import AuthFlow, AuthMode, StudioSession  # noqa: E402

SESSION_KEY = "premo_session"
# Submissions accepted in one run and carried out in the next, so the
# submit button is drawn disabled while the request is in flight.
PENDING_AUTH_KEY = "premo_pending_auth"
PENDING_PREDICTION_KEY = "premo_pending_prediction"

AUTH_SUBTITLES = {
    AuthMode.LOGIN: "Secure System Login",
    AuthMode.REGISTER: "New User Registration",
    AuthMode.RESET: "Credential Recovery",
}
AUTH_SUBMIT_LABELS = {
    AuthMode.LOGIN: "Log In",
    AuthMode.REGISTER: "Initiate Registration",
    AuthMode.RESET: "Transmit Reset Link",
}
LEVEL_CLASSES = {
    SuccessLevel.BLOCKBUSTER: "level-blockbuster",
    SuccessLevel.HIT: "level-hit",
    SuccessLevel.MODERATE: "level-moderate",
    SuccessLevel.FLOP: "level-flop",
}

# (field, label, placeholder) in form order; synopsis is rendered as a text area.
FORM_FIELDS = (
    ("title", "Project Title", "ENTER TITLE"),
    ("genre", "Genre", "ENTER GENRE"),
    ("director", "Director", "DIRECTOR NAME"),
    ("budget", "Est. Budget", "$ USD"),
    ("actors", "Key Cast", "LIST MAIN ACTORS"),
    ("synopsis", "Synopsis / Logline", "ENTER PLOT SUMMARY..."),
)


@st.cache_resource
def _get_backend() -> dict[str, Any]:
    return create_app()


def _rerun() -> None:
    st.rerun()


def _init_state() -> StudioSession:
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = StudioSession()
    return st.session_state[SESSION_KEY]


def _score_percent(score: int) -> int:
    """Clamp a service score into 0-100 for gauges."""
    return max(0, min(100, int(score)))


def _gauge_html(score: int) -> str:
    """Radial gauge drawn with a conic gradient; the ring is clamped, the label is not."""
    degrees = _score_percent(score) * 3.6
    return (
        f"<div class='score-gauge' style='background: conic-gradient(#dc2626 {degrees:g}deg, #1e293b 0deg)'>"
        f"<div class='score-value'>{int(score)}<span>%</span></div>"
        "</div>"
    )


def _level_class(level: SuccessLevel) -> str:
    return LEVEL_CLASSES.get(level, "level-moderate")


def _chips_html(items: Sequence[str]) -> str:
    if not items:
        return "<span class='chip muted'>None listed</span>"
    return "".join(f"<span class='chip'>{html.escape(item)}</span>" for item in items)


def _list_html(items: Sequence[str], marker: str) -> str:
    if not items:
        return "<p class='muted'>None listed.</p>"
    rows = "".join(
        f"<li><span class='marker'>{marker}</span>{html.escape(item)}</li>" for item in items
    )
    return f"<ul class='signal-list'>{rows}</ul>"


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        @import url('https://fonts.googleapis.com/css2?family=Oswald:wght@500;700&family=Inter:wght@300;400;600&family=JetBrains+Mono:wght@400;600&display=swap');

        .stApp {
            font-family: 'Inter', 'Segoe UI', sans-serif;
            color: #e2e8f0;
            background:
                radial-gradient(circle at 50% -10%, rgba(185, 28, 28, 0.22), transparent 45%),
                linear-gradient(180deg, #000000 0%, #020617 55%, #000000 100%);
        }

        header[data-testid="stHeader"],
        [data-testid="stToolbar"] {
            display: none;
        }

        .block-container {
            max-width: 1120px;
            padding-top: 1.2rem;
            padding-bottom: 3rem;
        }

        .brand {
            display: flex;
            align-items: center;
            gap: 0.8rem;
        }

        .brand-mark {
            width: 2.4rem;
            height: 2.4rem;
            background: #b91c1c;
            box-shadow: 0 0 15px rgba(185, 28, 28, 0.45);
            display: flex;
            align-items: center;
            justify-content: center;
            font-family: 'Oswald', sans-serif;
            font-weight: 700;
            color: #ffffff;
        }

        .brand-title {
            font-family: 'Oswald', sans-serif;
            font-size: 1.6rem;
            letter-spacing: -0.02em;
            color: #ffffff;
            line-height: 1;
            margin: 0;
        }

        .brand-sub {
            font-size: 0.62rem;
            letter-spacing: 0.3em;
            text-transform: uppercase;
            color: #dc2626;
            font-weight: 700;
        }

        .kicker {
            font-size: 0.62rem;
            letter-spacing: 0.25em;
            text-transform: uppercase;
            color: #64748b;
            margin: 0;
        }

        .identity {
            font-weight: 700;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            color: #ffffff;
            margin: 0;
        }

        .mode-pill {
            display: inline-block;
            padding: 0.2rem 0.7rem;
            font-family: 'JetBrains Mono', monospace;
            font-size: 0.68rem;
            letter-spacing: 0.18em;
            border: 1px solid #1e293b;
            background: rgba(0, 0, 0, 0.4);
            color: #94a3b8;
        }

        .mode-pill.live { border-color: rgba(220, 38, 38, 0.6); color: #fca5a5; }
        .mode-pill.demo { border-color: rgba(148, 163, 184, 0.5); color: #cbd5e1; }

        .panel {
            background: rgba(2, 6, 23, 0.82);
            border: 1px solid rgba(127, 29, 29, 0.3);
            padding: 1.4rem 1.5rem;
            margin-bottom: 1rem;
            position: relative;
        }

        .panel h4 {
            color: #dc2626;
            font-size: 0.65rem;
            font-weight: 700;
            letter-spacing: 0.28em;
            text-transform: uppercase;
            margin: 0 0 0.8rem;
        }

        .hero-title {
            font-family: 'Oswald', sans-serif;
            font-size: 2.8rem;
            text-transform: uppercase;
            letter-spacing: -0.02em;
            color: #ffffff;
            text-align: center;
            margin: 0.6rem 0 0.2rem;
        }

        .hero-rule {
            height: 3px;
            width: 5rem;
            background: #b91c1c;
            margin: 0 auto;
            box-shadow: 0 0 15px rgba(220, 38, 38, 0.5);
        }

        .hero-sub {
            text-align: center;
            color: #94a3b8;
            font-weight: 300;
            margin: 1rem auto 1.4rem;
            max-width: 34rem;
        }

        .auth-footer {
            text-align: center;
            color: #334155;
            font-family: 'JetBrains Mono', monospace;
            font-size: 0.62rem;
            letter-spacing: 0.2em;
            margin-top: 1.5rem;
        }

        .score-gauge {
            width: 11rem;
            height: 11rem;
            margin: 0.6rem auto;
            border-radius: 50%;
            display: flex;
            align-items: center;
            justify-content: center;
            background: #1e293b;
            box-shadow: 0 0 24px rgba(220, 38, 38, 0.2);
        }

        .score-gauge .score-value {
            width: 8.6rem;
            height: 8.6rem;
            border-radius: 50%;
            background: #020617;
            display: flex;
            align-items: center;
            justify-content: center;
            margin: 0;
        }

        .score-value {
            font-family: 'Oswald', sans-serif;
            font-size: 3.2rem;
            color: #ffffff;
            text-align: center;
            line-height: 1;
            margin: 0.4rem 0;
        }

        .score-value span { color: #dc2626; font-size: 1.6rem; }

        .level-pill {
            display: block;
            width: fit-content;
            margin: 0.4rem auto 0.8rem;
            padding: 0.15rem 0.7rem;
            border-radius: 999px;
            font-family: 'JetBrains Mono', monospace;
            font-size: 0.8rem;
            letter-spacing: 0.16em;
            text-transform: uppercase;
            border: 1px solid rgba(127, 29, 29, 0.5);
            background: rgba(69, 10, 10, 0.3);
            color: #ef4444;
        }

        .level-pill.level-blockbuster { color: #fde68a; border-color: rgba(250, 204, 21, 0.5); }
        .level-pill.level-hit { color: #fca5a5; }
        .level-pill.level-moderate { color: #cbd5e1; border-color: rgba(100, 116, 139, 0.6); }
        .level-pill.level-flop { color: #94a3b8; border-color: rgba(51, 65, 85, 0.8); }

        .box-office {
            font-family: 'Oswald', sans-serif;
            font-size: 2rem;
            color: #ffffff;
            margin: 0;
        }

        .reasoning {
            font-size: 1.1rem;
            font-weight: 300;
            line-height: 1.7;
            color: #e2e8f0;
            border-left: 3px solid rgba(127, 29, 29, 0.6);
            padding-left: 1rem;
        }

        .chip {
            display: inline-block;
            margin: 0 0.5rem 0.5rem 0;
            padding: 0.4rem 0.9rem;
            background: #000000;
            border: 1px solid #1e293b;
            border-left: 2px solid #991b1b;
            font-family: 'JetBrains Mono', monospace;
            font-size: 0.75rem;
            text-transform: uppercase;
            color: #cbd5e1;
        }

        .signal-list {
            list-style: none;
            padding: 0;
            margin: 0;
        }

        .signal-list li {
            display: flex;
            gap: 0.7rem;
            margin-bottom: 0.7rem;
            font-size: 0.92rem;
            color: #94a3b8;
        }

        .signal-list .marker { font-weight: 700; color: #dc2626; }
        .strengths .signal-list li { color: #cbd5e1; }
        .strengths .signal-list .marker { color: #ffffff; }
        .muted { color: #475569; }

        .stButton > button,
        .stFormSubmitButton > button,
        .stDownloadButton > button {
            border-radius: 0;
            text-transform: uppercase;
            letter-spacing: 0.18em;
            font-size: 0.78rem;
            font-weight: 700;
        }

        .stFormSubmitButton > button[kind="primaryFormSubmit"] {
            background: #b91c1c;
            border: 1px solid #991b1b;
            box-shadow: 0 0 20px rgba(185, 28, 28, 0.25);
        }

        .stTextInput input,
        .stTextArea textarea {
            background: rgba(2, 6, 23, 0.6);
            border-radius: 0;
            color: #f1f5f9;
        }

        .stTextInput label p,
        .stTextArea label p {
            font-size: 0.65rem;
            font-weight: 700;
            letter-spacing: 0.2em;
            text-transform: uppercase;
            color: #64748b;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _auth_screen(auth: AuthFlow) -> None:
    auth.tick()
    pending = st.session_state.pop(PENDING_AUTH_KEY, None)
    if pending is None:
        # A busy flow with nothing queued belongs to an interrupted run.
        auth.abandon()

    _, center, _ = st.columns([1, 1.4, 1])
    with center:
        st.markdown(
            f"""
            <div class="hero-title">PREMO</div>
            <div class="hero-rule"></div>
            <p class="hero-sub kicker">{html.escape(AUTH_SUBTITLES[auth.mode])}</p>
            """,
            unsafe_allow_html=True,
        )

        if auth.error:
            st.error(auth.error)
        if auth.notice:
            st.success(auth.notice)

        with st.form("premo_auth_form"):
            name = ""
            password = ""
            if auth.mode is AuthMode.REGISTER:
                name = st.text_input("Codename", placeholder="Enter your alias", key="premo_auth_name")
            email = st.text_input("Email Frequency", placeholder="user@premo.ai", key="premo_auth_email")
            if auth.mode is not AuthMode.RESET:
                password = st.text_input(
                    "Password",
                    type="password",
                    placeholder="••••••••",
                    key="premo_auth_password",
                )
            submitted = st.form_submit_button(
                AUTH_SUBMIT_LABELS[auth.mode],
                type="primary",
                use_container_width=True,
                disabled=auth.is_busy,
            )

        if submitted:
            ticket = auth.submit(name=name, email=email, password=password)
            if ticket is not None:
                st.session_state[PENDING_AUTH_KEY] = ticket
            _rerun()

        toggle_cols = st.columns(2)
        if auth.mode is not AuthMode.RESET:
            register_label = (
                "Already have an ID? Login" if auth.mode is AuthMode.REGISTER else "No Access ID? Register"
            )
            if toggle_cols[0].button(register_label, key="premo_toggle_register", use_container_width=True):
                auth.toggle_register()
                _rerun()
        reset_label = "Return to Login" if auth.mode is AuthMode.RESET else "Forgot Password?"
        if toggle_cols[1].button(reset_label, key="premo_toggle_reset", use_container_width=True):
            auth.toggle_reset()
            _rerun()

        st.markdown(
            "<div class='auth-footer'>PREMO SYSTEM v2.5.0 // SECURE CONNECTION</div>",
            unsafe_allow_html=True,
        )

        if pending is not None:
            with st.spinner("Establishing secure channel..."):
                time.sleep(pending.delay)
            auth.complete(pending)
            _rerun()

    # Hold the run until a scheduled mode switch is due, then redraw.
    wait = auth.seconds_until_switch()
    if wait is not None:
        time.sleep(wait)
        _rerun()


def _header(studio: StudioSession, demo_mode: bool) -> None:
    mode_class = "demo" if demo_mode else "live"
    mode_text = "DEMO MODE" if demo_mode else "SYSTEM ONLINE"

    brand_col, mode_col, user_col, logout_col = st.columns([2.2, 1.2, 1.2, 0.8])
    brand_col.markdown(
        """
        <div class="brand">
          <div class="brand-mark">P</div>
          <div>
            <p class="brand-title">PREMO</p>
            <span class="brand-sub">Intelligence</span>
          </div>
        </div>
        """,
        unsafe_allow_html=True,
    )
    mode_col.markdown(f"<span class='mode-pill {mode_class}'>{mode_text}</span>", unsafe_allow_html=True)
    user_col.markdown(
        f"""
        <p class="kicker">Logged In As</p>
        <p class="identity">{html.escape(studio.identity or "")}</p>
        """,
        unsafe_allow_html=True,
    )
    if logout_col.button("Logout", key="premo_logout", use_container_width=True):
        studio.logout()
        _rerun()
    st.markdown("---")


def _project_form(flow: ProjectFlow, predictor: Any) -> None:
    pending = st.session_state.pop(PENDING_PREDICTION_KEY, None)
    if pending is None:
        # A SUBMITTING state with nothing queued belongs to an interrupted run.
        flow.abandon()

    st.markdown(
        """
        <div class="hero-title">Project Analytics</div>
        <div class="hero-rule"></div>
        <p class="hero-sub">Input script parameters to initialize the predictive success model.</p>
        """,
        unsafe_allow_html=True,
    )

    if flow.error:
        st.error(f"Error: {flow.error}")

    epoch = flow.form_epoch
    labels = {name: (label, placeholder) for name, label, placeholder in FORM_FIELDS}
    values: dict[str, str] = {}

    def _field(container: Any, name: str) -> None:
        label, placeholder = labels[name]
        values[name] = container.text_input(
            label,
            value=getattr(flow.form, name),
            placeholder=placeholder,
            key=f"premo_{name}_{epoch}",
        )

    with st.form("premo_project_form"):
        row_a = st.columns(2)
        _field(row_a[0], "title")
        _field(row_a[1], "genre")
        row_b = st.columns(2)
        _field(row_b[0], "director")
        _field(row_b[1], "budget")
        _field(st, "actors")
        label, placeholder = labels["synopsis"]
        values["synopsis"] = st.text_area(
            label,
            value=flow.form.synopsis,
            placeholder=placeholder,
            height=140,
            key=f"premo_synopsis_{epoch}",
        )
        submitted = st.form_submit_button(
            "Initiate Analysis",
            type="primary",
            use_container_width=True,
            disabled=flow.is_busy,
        )

    if pending is not None:
        with st.spinner("Processing data..."):
            flow.run(pending, predictor)
        _rerun()

    if submitted:
        flow.edit(**values)
        token = flow.begin_submit()
        if token is not None:
            st.session_state[PENDING_PREDICTION_KEY] = token
        _rerun()


def _dashboard(flow: ProjectFlow, demo_mode: bool) -> None:
    result: PredictionResult = flow.result
    movie: MovieInput = flow.form

    head_col, action_col = st.columns([3, 1])
    head_col.markdown(
        f"""
        <div class="hero-title" style="text-align:left;font-size:2.2rem;">Analysis Complete</div>
        <p class="kicker">PROJECTION_ID: {html.escape(flow.projection_id or "")}</p>
        """,
        unsafe_allow_html=True,
    )
    if action_col.button("New Analysis", key="premo_reset", use_container_width=True):
        flow.reset()
        _rerun()

    if demo_mode:
        st.info("Demo mode: this forecast was generated offline. Set PREMO_API_KEY for live analysis.")

    score_col, detail_col = st.columns([1, 2])
    with score_col:
        st.markdown(
            f"""
            <div class="panel">
              <h4>Success Probability</h4>
              {_gauge_html(result.success_score)}
              <span class="level-pill {_level_class(result.success_level)}">{html.escape(result.success_level.value)}</span>
            </div>
            """,
            unsafe_allow_html=True,
        )

    with detail_col:
        money_col, audience_col = st.columns(2)
        money_col.markdown(
            f"""
            <div class="panel">
              <h4>Est. Box Office</h4>
              <p class="box-office">{html.escape(result.estimated_box_office)}</p>
            </div>
            """,
            unsafe_allow_html=True,
        )
        audience_col.markdown(
            f"""
            <div class="panel">
              <h4>Target Audience</h4>
              <p>{html.escape(result.target_audience)}</p>
            </div>
            """,
            unsafe_allow_html=True,
        )
        st.markdown(
            f"""
            <div class="panel">
              <h4>Comparable Titles</h4>
              {_chips_html(result.comparable_movies)}
            </div>
            """,
            unsafe_allow_html=True,
        )

    st.markdown(
        f"""
        <div class="panel">
          <h4>AI Analysis Log</h4>
          <p class="reasoning">"{html.escape(result.reasoning)}"</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    risk_col, strength_col = st.columns(2)
    risk_col.markdown(
        f"""
        <div class="panel">
          <h4>Risk Factors</h4>
          {_list_html(result.weaknesses, "✕")}
        </div>
        """,
        unsafe_allow_html=True,
    )
    strength_col.markdown(
        f"""
        <div class="panel strengths">
          <h4>Market Strengths</h4>
          {_list_html(result.strengths, "✓")}
        </div>
        """,
        unsafe_allow_html=True,
    )

    slug = report_slug(movie.title, flow.projection_id)
    dl_md, dl_json = st.columns(2)
    dl_md.download_button(
        "Download Report",
        data=prediction_markdown(movie, result, flow.projection_id),
        file_name=f"{slug}.md",
        mime="text/markdown",
        use_container_width=True,
        key="dl_report_md",
    )
    dl_json.download_button(
        "Download JSON",
        data=prediction_json(movie, result, flow.projection_id),
        file_name=f"{slug}.json",
        mime="application/json",
        use_container_width=True,
        key="dl_report_json",
    )


def main() -> None:
    st.set_page_config(
        page_title="PREMO Intelligence",
        page_icon="🎬",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    studio = _init_state()
    _inject_styles()

    if not studio.is_authenticated:
        _auth_screen(studio.auth)
        return

    backend = _get_backend()
    predictor = backend["predictor"]
    demo_mode = predictor.demo_mode

    _header(studio, demo_mode)
    if studio.project.has_result:
        _dashboard(studio.project, demo_mode)
    else:
        _project_form(studio.project, predictor)


if __name__ == "__main__":
    main()
