import streamlit as st
from contextlib import contextmanager
from typing import Optional

from core.charts import AltairRenderer, COLORS
from core.config import DashboardConfig, configure_logging
from core.errors import ExportError
from core.export import build_export
from core.filters import ALL, DashboardFilters, filter_options, normalize_filters
from core.lifecycle import DashboardController, RecordingSurface, State

config = DashboardConfig.from_env()
configure_logging(config.log_level)

CHART_ROWS = [
    [("paradox", "The Independence Paradox"), ("independence", "Self-Guided vs Guided Tours"), ("authenticity_gap", "The Authenticity Gap")],
    [("age", "Age Distribution"), ("profession", "Professions")],
    [("frequency", "Travel Frequency"), ("budget", "Budget Split")],
    [("companions", "Travel Companions"), ("exploration", "Exploration Methods")],
    [("experiences", "Desired Experiences"), ("problems", "Top Problems")],
    [("desire_vs_fear", "Desires vs Fears")],
    [("satisfaction", "Satisfaction"), ("frustration", "Frustration"), ("missing", "Missing Experiences"), ("overspending", "Overspending")],
]


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        f"""
        <style>
        .app-top-bar {{padding: 6px 0 4px;border-bottom: 1px solid {COLORS["grid"]};margin-bottom: 10px;}}
        .app-top-bar .page-title {{font-size: 1.4rem;font-weight: 700;color: {COLORS["text"]};}}
        .card {{border: 1px solid {COLORS["grid"]};border-radius: 12px;padding: 16px;background: {COLORS["panel"]};
               box-shadow: 0 1px 2px rgba(0,0,0,0.3); margin-bottom: 12px;}}
        .card-title {{font-weight: 600;font-size: 1.0rem;color: {COLORS["text"]};margin-bottom: 8px;}}
        .chip-row {{display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}}
        .chip {{background: {COLORS["panel"]};border: 1px solid {COLORS["grid"]};border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: {COLORS["text"]};}}
        .insight-metric {{font-size: 2rem;font-weight: 700;color: {COLORS["cyan"]};}}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(filters: DashboardFilters, scale_factor: Optional[float]) -> str:
    chips = [
        "Age: All" if filters.age_group == ALL else f"Age: {filters.age_group}",
        "Profession: All" if filters.profession == ALL else f"Profession: {filters.profession}",
    ]
    if scale_factor is not None:
        chips.append(f"Approximate view (x{scale_factor:.2f})")
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def get_controller() -> DashboardController:
    if "controller" not in st.session_state:
        controller = DashboardController(AltairRenderer(), RecordingSurface(), config)
        with st.spinner("Loading travel insights..."):
            controller.start()
        st.session_state["controller"] = controller
    return st.session_state["controller"]


# ---------- UI setup ----------
st.set_page_config(page_title="Travel Analytics Dashboard", layout="wide")
inject_base_styles()
st.markdown("<div class='app-top-bar'><div class='page-title'>Travel Analytics Dashboard</div></div>", unsafe_allow_html=True)
st.caption("What travelers want, what stops them, and how they feel about it.")

controller = get_controller()
surface: RecordingSurface = controller.surface
if controller.state is State.FAILED:
    st.error(surface.error or "Failed to load data.")
    st.stop()

view = controller.view
options = filter_options(controller.dataset)


def _apply_filters():
    raw = {"age_group": st.session_state["age_filter"], "profession": st.session_state["profession_filter"]}
    controller.apply_filters(normalize_filters(raw, dataset=controller.dataset))


def _reset_filters():
    st.session_state["age_filter"] = ALL
    st.session_state["profession_filter"] = ALL
    controller.reset_filters()


# ----- Sidebar: filters + export -----
with st.sidebar:
    st.markdown("### Filters")
    st.selectbox("Age group", options=options["age_group"], key="age_filter")
    st.selectbox("Profession", options=options["profession"], key="profession_filter")
    btn_cols = st.columns(2)
    btn_cols[0].button("Apply", on_click=_apply_filters, type="primary")
    btn_cols[1].button("Reset", on_click=_reset_filters)
    st.caption("Filtered views are approximations: counts are scaled, not re-tallied.")

    st.markdown("---")
    try:
        artifact = build_export(view)
    except ExportError as exc:
        st.error(f"Export failed: {exc}")
    else:
        st.download_button(
            "Export data",
            data=artifact.content,
            file_name=artifact.filename,
            mime=artifact.mime,
            on_click=surface.notify,
            args=("Data exported successfully!",),
        )

for message in surface.drain_notifications():
    st.toast(message)

st.markdown(f"<div class='chip-row'>{format_filter_summary(view.filters, view.scale_factor)}</div>", unsafe_allow_html=True)


# ----- KPI tiles -----
kpis = surface.kpis
kpi_cols = st.columns(3)
kpi_cols[0].metric("Total Responses", f"{kpis.total_responses:,}")
kpi_cols[1].metric("Primary Age Group", kpis.primary_age_group)
kpi_cols[2].metric("Top Problem", kpis.top_problem)


# ----- Dilemma insights -----
insights = surface.insights
if insights is None:
    st.info("No responses in the current view.")
else:
    insight_cols = st.columns(2)
    for col, (key, title) in zip(insight_cols, [("independence", "The Paradox of Independence"), ("authenticity", "The Search for Authenticity")]):
        with col:
            with card(title):
                insight = insights[key]
                st.markdown(f"<div class='insight-metric'>{insight['metric']}</div>", unsafe_allow_html=True)
                st.caption(insight["caption"])
                st.write(insight["detail"])


# ----- Charts -----
for row in CHART_ROWS:
    cols = st.columns(len(row))
    for col, (mount, title) in zip(cols, row):
        widget = controller.binder.widgets.get(mount)
        with col:
            with card(title):
                if widget is None or widget.destroyed:
                    st.info("Chart unavailable.")
                else:
                    st.vega_lite_chart(widget.spec, use_container_width=True, theme=None)
