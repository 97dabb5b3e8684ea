from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

logger = logging.getLogger(__name__)

CATEGORY = "category"
PROPORTION = "proportion"
STACKED = "stacked"
CHART_KINDS = (CATEGORY, PROPORTION, STACKED)

COLORS = {
    "cyan": "#39c5f7",
    "magenta": "#e577ff",
    "green": "#56d364",
    "red": "#ff7b72",
    "yellow": "#e3b341",
    "orange": "#f08a5d",
    "purple": "#a77dff",
    "blue": "#5b9dff",
    "mint": "#88d8b0",
    "text": "#f0f6fc",
    "grid": "rgba(139, 148, 158, 0.2)",
    "panel": "#161b22",
}
PALETTE = [COLORS["cyan"], COLORS["yellow"], COLORS["magenta"], COLORS["green"], COLORS["orange"], COLORS["purple"]]
TOOLTIP_BACKGROUND = "rgba(13, 17, 23, 0.9)"
ANIMATION_MS = 1500

Label = Union[str, List[str]]


@dataclass(frozen=True)
class TooltipContext:
    label: str
    dataset_label: str
    value: float
    index: int
    dataset_values: Sequence[float] = ()


TooltipLabel = Callable[[TooltipContext], str]


@dataclass
class ChartDataset:
    label: str
    values: List[float]
    style: Dict[str, Any] = field(default_factory=dict)
    stack: Optional[str] = None


@dataclass
class ChartSpec:
    """What the charting collaborator is handed for one mount point."""

    kind: str
    labels: List[Label]
    datasets: List[ChartDataset]
    options: Dict[str, Any]


def proportion_tooltip(ctx: TooltipContext) -> str:
    whole = sum(ctx.dataset_values)
    share = f"{ctx.value / whole * 100:.1f}" if whole > 0 else "0"
    return f"{ctx.label}: {ctx.value} ({share}%)"


def value_tooltip(ctx: TooltipContext) -> str:
    return f"{ctx.dataset_label}: {ctx.value}"


def chart_options(
    kind: str,
    *,
    show_legend: bool = True,
    horizontal: bool = False,
    tooltip_label: Optional[TooltipLabel] = None,
    axis_title: Optional[str] = None,
    animation_ms: int = ANIMATION_MS,
) -> Dict[str, Any]:
    """Build the option bundle shared by every chart.

    Palette, tooltip styling and animation come from here for all kinds, so two
    charts of the same kind always look alike. Proportion charts always carry a
    legend; bar-style charts honour ``show_legend``.
    """
    if kind not in CHART_KINDS:
        raise ValueError(f"Unknown chart kind {kind!r}")

    options: Dict[str, Any] = {
        "responsive": True,
        "maintain_aspect_ratio": False,
        "legend": {
            "display": kind == PROPORTION or show_legend,
            "position": "bottom",
            "color": COLORS["text"],
            "padding": 15,
            "point_style": True,
            "font_size": 12,
        },
        "tooltip": {
            "background": TOOLTIP_BACKGROUND,
            "title_color": COLORS["text"],
            "body_color": COLORS["text"],
            "border_color": COLORS["grid"],
            "border_width": 1,
            "padding": 10,
            "label": tooltip_label or (proportion_tooltip if kind == PROPORTION else value_tooltip),
        },
        "animation": {"duration_ms": animation_ms, "easing": "easeInOutQuart"},
    }
    if kind != PROPORTION:
        options["index_axis"] = "y" if horizontal else "x"
        options["scales"] = {
            "x": {"tick_color": COLORS["text"], "font_size": 11, "grid_color": COLORS["grid"]},
            "y": {"tick_color": COLORS["text"], "font_size": 10 if horizontal else 11, "grid_color": COLORS["grid"]},
        }
        options["axis_title"] = axis_title
    return options


def wrap_label(text: str, width: int) -> Label:
    if len(text) <= width:
        return text
    return textwrap.wrap(text, width=width, break_long_words=False, break_on_hyphens=False)


def _label_text(label: Label, sep: str = " ") -> str:
    return sep.join(label) if isinstance(label, list) else label


def _color_at(style: Dict[str, Any], index: int) -> str:
    color = style.get("color", PALETTE[0])
    if isinstance(color, (list, tuple)):
        return color[index % len(color)] if color else PALETTE[index % len(PALETTE)]
    return color


def chart_frame(spec: ChartSpec) -> pd.DataFrame:
    """Long-form rows (one per label per dataset) with tooltip text resolved."""
    tooltip: TooltipLabel = spec.options["tooltip"]["label"]
    rows = []
    for ds in spec.datasets:
        for i, (label, value) in enumerate(zip(spec.labels, ds.values)):
            ctx = TooltipContext(
                label=_label_text(label),
                dataset_label=ds.label,
                value=value,
                index=i,
                dataset_values=ds.values,
            )
            rows.append(
                {
                    "label": _label_text(label, "\n"),
                    "series": ds.label,
                    "stack": ds.stack or ds.label,
                    "value": value,
                    "color": _color_at(ds.style, i),
                    "order": i,
                    "tooltip": tooltip(ctx),
                }
            )
    return pd.DataFrame(rows, columns=["label", "series", "stack", "value", "color", "order", "tooltip"])


def _legend(options: Dict[str, Any]) -> Optional[alt.Legend]:
    if not options["legend"]["display"]:
        return None
    return alt.Legend(orient=options["legend"]["position"], title=None, symbolType="circle")


def _series_color(spec: ChartSpec) -> alt.Color:
    return alt.Color(
        "series:N",
        sort=None,
        scale=alt.Scale(domain=[ds.label for ds in spec.datasets], range=[_color_at(ds.style, 0) for ds in spec.datasets]),
        legend=_legend(spec.options),
    )


def build_altair_chart(spec: ChartSpec) -> alt.Chart:
    df = chart_frame(spec)
    options = spec.options
    tooltip = [alt.Tooltip("tooltip:N", title="")]
    base = alt.Chart(df)

    if spec.kind == PROPORTION:
        style = spec.datasets[0].style if spec.datasets else {}
        domain = [_label_text(label, "\n") for label in spec.labels]
        colors = [_color_at(style, i) for i in range(len(domain))]
        chart = base.mark_arc(
            innerRadius=50,
            stroke=style.get("border_color", COLORS["panel"]),
            strokeWidth=style.get("border_width", 0),
        ).encode(
            theta=alt.Theta("value:Q", stack=True),
            color=alt.Color("label:N", sort=None, scale=alt.Scale(domain=domain, range=colors), legend=_legend(options)),
            order=alt.Order("order:Q"),
            tooltip=tooltip,
        )
    else:
        horizontal = options["index_axis"] == "y"
        cat_axis = alt.Axis(title=None, labelExpr="split(datum.label, '\\n')")
        value_axis = alt.Axis(title=options.get("axis_title"))
        style = spec.datasets[0].style if spec.datasets else {}
        mark = base.mark_bar(cornerRadius=style.get("corner_radius", 0), **({"size": style["bar_size"]} if "bar_size" in style else {}))
        if horizontal:
            encoding = {"y": alt.Y("label:N", sort=None, axis=cat_axis), "x": alt.X("value:Q", axis=value_axis)}
        else:
            encoding = {"x": alt.X("label:N", sort=None, axis=cat_axis), "y": alt.Y("value:Q", axis=value_axis)}
        if spec.kind == STACKED:
            offset = alt.YOffset("stack:N") if horizontal else alt.XOffset("stack:N")
            encoding["yOffset" if horizontal else "xOffset"] = offset
            encoding["color"] = _series_color(spec)
        elif options["legend"]["display"]:
            encoding["color"] = _series_color(spec)
        else:
            encoding["color"] = alt.Color("color:N", scale=None, legend=None)
        chart = mark.encode(tooltip=tooltip, **encoding)

    scales = options.get("scales", {})
    return (
        chart.properties(height=260)
        .configure_axis(
            labelColor=COLORS["text"],
            titleColor=COLORS["text"],
            gridColor=scales.get("x", {}).get("grid_color", COLORS["grid"]),
            labelFontSize=scales.get("x", {}).get("font_size", 11),
        )
        .configure_legend(labelColor=COLORS["text"], labelFontSize=options["legend"]["font_size"], padding=options["legend"]["padding"])
        .configure_view(strokeWidth=0)
    )


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def render_vega_spec(spec: ChartSpec) -> Dict[str, Any]:
    vega = to_vega_spec(build_altair_chart(spec))
    vega["background"] = "transparent"
    vega["usermeta"] = {"kind": spec.kind, "animation": dict(spec.options["animation"])}
    return vega


class VegaLiteWidget:
    """A rendered chart bound to a named mount point."""

    def __init__(self, mount: str, spec: Dict[str, Any]) -> None:
        self.mount = mount
        self.spec: Optional[Dict[str, Any]] = spec

    @property
    def destroyed(self) -> bool:
        return self.spec is None

    def destroy(self) -> None:
        self.spec = None


class AltairRenderer:
    """Charting collaborator backed by Altair / Vega-Lite."""

    def create(self, mount: str, spec: ChartSpec) -> VegaLiteWidget:
        logger.debug("Rendering %s chart into %s", spec.kind, mount)
        return VegaLiteWidget(mount, render_vega_spec(spec))
