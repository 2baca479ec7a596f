import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Any, Dict, Optional

from core import data as dc
from core.filters import ALL
from core.metrics_debug import compute_debug
from core.metrics_exploration import compute_exploration
from core.metrics_ml import compute_ml
from core.metrics_overview import compute_overview

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body


def format_filter_summary(task: str, env: str) -> str:
    task_chip = "Task: All" if task == ALL else f"Task: {task}"
    env_chip = "Environment: All" if env == ALL else f"Environment: {env}"
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [task_chip, env_chip]])


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str, export_df: Optional[pd.DataFrame] = None):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name="filtered_rows.csv",
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def show_spec(spec: Optional[Dict[str, Any]], empty_msg: str = "No data for the current filters."):
    if spec:
        st.vega_lite_chart(spec, use_container_width=True)
    else:
        st.info(empty_msg)


# ---------- UI setup ----------
st.set_page_config(page_title="Agentic AI Performance Dashboard", layout="wide")
inject_base_styles()
st.title("Agentic AI Performance Dashboard")
st.caption("Task success, resource usage and a small regression over simulated agent runs.")

data_ctx = dc.load_dashboard_data()
if not data_ctx.get("file"):
    st.error(f"No dataset found. Place {dc.CSV_GLOB} in {dc.DATA_DIR} or set {dc.CSV_ENV_VAR}.")
    st.stop()

task_options = [ALL] + data_ctx.get("task_categories", [])
env_options = [ALL] + data_ctx.get("deployment_environments", [])


def _label(value: str) -> str:
    return "All" if value == ALL else value


def reset_filters():
    st.session_state["filter_task"] = ALL
    st.session_state["filter_env"] = ALL


# ----- Sidebar: navigation + filters -----
with st.sidebar:
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Overview", "Exploration", "Regression & Distribution", "Data Quality"], index=0)

    st.markdown("---")
    st.markdown("### Filters")
    task = st.selectbox("Task category", options=task_options, format_func=_label, key="filter_task")
    env = st.selectbox("Deployment environment", options=env_options, format_func=_label, key="filter_env")
    st.button("Reset filters", on_click=reset_filters)

    st.markdown("---")
    with st.expander("Advanced settings", expanded=False):
        top_n = st.slider("Top models", min_value=1, max_value=20, value=6, step=1)
        scatter_sample = st.slider("Predicted vs actual sample size", min_value=100, max_value=3000, value=900, step=100)

filters = {
    "task_category": task,
    "deployment_environment": env,
    "top_n": top_n,
    "scatter_sample": scatter_sample,
}

ctx = dc.prepare_context(filters, data_ctx)
filt = ctx["filters"]
filter_summary_html = format_filter_summary(filt.task_category, filt.deployment_environment)


def render_overview_page():
    payload = compute_overview(filt, ctx)
    render_page_header("Overview", "Dashboard / Overview", filter_summary_html, dc.rows_to_frame(ctx["filtered_rows"]))
    kd = payload["kpis_display"]
    cols = st.columns(6)
    cols[0].metric("Rows", kd["rows"])
    cols[1].metric("Columns", kd["columns"])
    cols[2].metric("Avg accuracy", kd["mean_accuracy"])
    cols[3].metric("Avg cost", kd["mean_cost"])
    cols[4].metric("Avg time", kd["mean_time"])
    cols[5].metric("Avg CPU", kd["mean_cpu"])

    with card("Top performing models"):
        top = pd.DataFrame(payload["top_models"])
        if top.empty:
            st.info("No models for the current filters.")
        else:
            st.dataframe(
                top.rename(columns={"name": "Model", "mean_performance": "Avg performance", "mean_accuracy": "Avg accuracy"}),
                hide_index=True,
            )


def render_exploration_page():
    payload = compute_exploration(filt, ctx)
    render_page_header("Exploration", "Dashboard / Exploration", filter_summary_html)
    charts = payload["charts"]
    c1, c2 = st.columns(2)
    with c1:
        with card("Autonomy level vs average success rate"):
            show_spec(charts.get("autonomy_success"))
    with c2:
        with card("Task complexity vs average CPU usage"):
            show_spec(charts.get("complexity_cpu"))
    with card("Complexity vs execution time (bubble size = accuracy)"):
        show_spec(charts.get("bubble"))


def render_ml_page():
    payload = compute_ml(filt, ctx)
    render_page_header("Regression & Distribution", "Dashboard / ML", filter_summary_html)
    charts = payload["charts"]
    err = payload.get("error")
    if err:
        if err["type"] == "insufficient_data":
            st.warning(f"Not enough complete rows to fit the regression. {err['message']}")
        elif err["type"] == "singular_matrix":
            st.warning("The features are collinear for this selection; the regression cannot be solved.")
        else:
            st.warning(err["message"])

    c1, c2 = st.columns(2)
    with c1:
        with card("Regression coefficients (accuracy ~ complexity + cost + time)"):
            show_spec(charts.get("coefficients"), "No regression for the current filters.")
    with c2:
        with card("Accuracy by complexity level"):
            show_spec(charts.get("boxplot"))
    with card(payload["title"]):
        show_spec(charts.get("predicted_actual"), "No regression for the current filters.")


def render_debug_page():
    payload = compute_debug(filt, ctx)
    render_page_header("Data Quality", "Dashboard / Debug", filter_summary_html)
    with card("Row counts"):
        st.write(payload["row_counts"])
    with card("Missing optional fields"):
        st.write(payload["missing_optional"])
    with card("Sample rows"):
        st.dataframe(pd.DataFrame(payload["sample"]), hide_index=True)
    st.caption(f"Source file: {payload['file']}")


if nav_choice == "Overview":
    render_overview_page()
elif nav_choice == "Exploration":
    render_exploration_page()
elif nav_choice == "Regression & Distribution":
    render_ml_page()
else:
    render_debug_page()
