"""Dashboard rendering helper tests for the Streamlit app."""

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from streamlit_app import (  # noqa: E402
    FORM_FIELDS,
    _chips_html,
    _gauge_html,
    _level_class,
    _list_html,
    _score_percent,
)
from premo.models import MovieInput, SuccessLevel  # noqa: E402


def test_score_gauge_is_clamped():
    assert _score_percent(72) == 72
    assert _score_percent(-4) == 0
    assert _score_percent(140) == 100


def test_gauge_ring_is_clamped_but_label_is_not():
    assert "conic-gradient(#dc2626 259.2deg" in _gauge_html(72)
    assert ">72<span>%</span>" in _gauge_html(72)

    overflow = _gauge_html(140)
    assert "conic-gradient(#dc2626 360deg" in overflow
    assert ">140<span>%</span>" in overflow
    assert "conic-gradient(#dc2626 0deg" in _gauge_html(-4)


def test_every_level_has_a_style():
    classes = {_level_class(level) for level in SuccessLevel}
    assert len(classes) == len(SuccessLevel)


def test_chips_and_lists_escape_service_text():
    chips = _chips_html(["<b>Heat</b>", "Arrival"])
    assert "&lt;b&gt;Heat&lt;/b&gt;" in chips
    assert chips.count("class='chip'") == 2
    assert "None listed" in _chips_html([])

    listing = _list_html(["Crowded <window>"], "✕")
    assert "Crowded &lt;window&gt;" in listing
    assert "✕" in listing


def test_form_covers_every_movie_field():
    assert sorted(name for name, _, _ in FORM_FIELDS) == sorted(MovieInput.field_names())
