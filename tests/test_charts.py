"""Unit tests for the chart option factory, label wrapping and Vega-Lite rendering."""

from __future__ import annotations

import pytest

from core.charts import (
    CATEGORY,
    COLORS,
    PROPORTION,
    STACKED,
    AltairRenderer,
    ChartDataset,
    ChartSpec,
    TooltipContext,
    chart_frame,
    chart_options,
    proportion_tooltip,
    render_vega_spec,
    value_tooltip,
    wrap_label,
)

pytestmark = pytest.mark.unit


def _mark_type(vega: dict) -> str:
    mark = vega["mark"]
    return mark["type"] if isinstance(mark, dict) else mark


def test_wrap_label_breaks_on_word_boundaries() -> None:
    lines = wrap_label("Difficulty in finding locations beyond tourist spots", 25)
    assert isinstance(lines, list)
    assert len(lines) > 1
    assert all(len(line) <= 25 for line in lines)
    assert " ".join(lines) == "Difficulty in finding locations beyond tourist spots"


def test_wrap_label_keeps_overlong_word_whole() -> None:
    lines = wrap_label("An extraordinarilyunbreakableword here", 10)
    assert "extraordinarilyunbreakableword" in lines
    assert all(len(line) <= 10 for line in lines if line != "extraordinarilyunbreakableword")


def test_wrap_label_short_text_unchanged() -> None:
    assert wrap_label("Solo", 20) == "Solo"


def test_options_share_palette_and_animation_across_kinds() -> None:
    bundles = [chart_options(kind) for kind in (CATEGORY, PROPORTION, STACKED)]
    for bundle in bundles:
        assert bundle["tooltip"]["background"] == bundles[0]["tooltip"]["background"]
        assert bundle["legend"]["color"] == COLORS["text"]
        assert bundle["animation"] == {"duration_ms": 1500, "easing": "easeInOutQuart"}


def test_proportion_always_shows_legend() -> None:
    assert chart_options(PROPORTION, show_legend=False)["legend"]["display"] is True
    assert chart_options(CATEGORY, show_legend=False)["legend"]["display"] is False
    assert "scales" not in chart_options(PROPORTION)


def test_horizontal_bars_index_on_y() -> None:
    options = chart_options(CATEGORY, horizontal=True)
    assert options["index_axis"] == "y"
    assert options["scales"]["y"]["font_size"] == 10


def test_unknown_kind_rejected() -> None:
    with pytest.raises(ValueError):
        chart_options("radar")


def test_default_tooltips() -> None:
    ctx = TooltipContext(label="Solo", dataset_label="Travelers", value=25, index=0, dataset_values=[25, 75])
    assert proportion_tooltip(ctx) == "Solo: 25 (25.0%)"
    assert value_tooltip(ctx) == "Travelers: 25"
    empty = TooltipContext(label="Solo", dataset_label="Travelers", value=0, index=0, dataset_values=[0, 0])
    assert proportion_tooltip(empty) == "Solo: 0 (0%)"


def test_custom_tooltip_label_is_applied_per_datum() -> None:
    spec = ChartSpec(
        kind=CATEGORY,
        labels=["a", ["b", "c"]],
        datasets=[ChartDataset("Values", [1, 2], {"color": ["#111111", "#222222"]})],
        options=chart_options(CATEGORY, tooltip_label=lambda ctx: f"#{ctx.index}:{ctx.label}"),
    )
    frame = chart_frame(spec)
    assert frame["tooltip"].tolist() == ["#0:a", "#1:b c"]
    assert frame["label"].tolist() == ["a", "b\nc"]
    assert frame["color"].tolist() == ["#111111", "#222222"]


def test_render_proportion_chart_as_arc() -> None:
    spec = ChartSpec(
        kind=PROPORTION,
        labels=["Yes", "No"],
        datasets=[ChartDataset("Respondents", [3, 1], {"color": ["#ff0000", "#00ff00"]})],
        options=chart_options(PROPORTION, animation_ms=0),
    )
    vega = render_vega_spec(spec)
    assert _mark_type(vega) == "arc"
    assert vega["encoding"]["color"]["scale"]["range"] == ["#ff0000", "#00ff00"]
    assert vega["usermeta"]["animation"]["duration_ms"] == 0


def test_render_stacked_chart_offsets_stacks() -> None:
    spec = ChartSpec(
        kind=STACKED,
        labels=[""],
        datasets=[
            ChartDataset("Seeks", [5], {"color": "#00ff00"}, "desire"),
            ChartDataset("Scams", [3], {"color": "#ff0000"}, "barrier"),
        ],
        options=chart_options(STACKED, horizontal=True),
    )
    vega = render_vega_spec(spec)
    assert _mark_type(vega) == "bar"
    assert "yOffset" in vega["encoding"]
    assert vega["encoding"]["color"]["scale"]["domain"] == ["Seeks", "Scams"]


def test_renderer_widget_destroy_releases_spec() -> None:
    spec = ChartSpec(CATEGORY, ["a"], [ChartDataset("A", [1])], chart_options(CATEGORY))
    widget = AltairRenderer().create("frequency", spec)
    assert widget.mount == "frequency"
    assert not widget.destroyed
    widget.destroy()
    assert widget.destroyed
