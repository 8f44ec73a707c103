"""
Веб-интерфейс портала отзывов.

Запуск: streamlit run feedback_portal/ui/app.py
"""
import altair as alt
import pandas as pd
import streamlit as st

from feedback_portal.config import get_settings
from feedback_portal.logging_config import setup_logging
from feedback_portal.feedback.schemas import FeedbackCategory, format_category_name
from feedback_portal.clients import (
    FeedbackApiClient,
    FeedbackDashboard,
    FeedbackForm,
    SubmissionClient,
    analyze_feedback,
    SORT_OPTIONS,
    ROWS_PER_PAGE_OPTIONS,
)

CATEGORY_OPTIONS = [""] + [c.value for c in FeedbackCategory]

# Ключи виджетов формы и их значения после сброса
FORM_DEFAULTS = {f"form_{field}": value for field, value in FeedbackForm().model_dump().items()}


def _store_fetched(data: list[dict]) -> None:
    st.session_state.feedback_data = data


def _on_submitted() -> None:
    st.session_state.refresh_trigger += 1
    st.session_state.dashboard.refresh(st.session_state.refresh_trigger)


def init_state() -> None:
    if "api" in st.session_state:
        return

    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    api = FeedbackApiClient()
    st.session_state.api = api
    st.session_state.feedback_data = []
    st.session_state.refresh_trigger = 0
    st.session_state.dashboard = FeedbackDashboard(api, on_data_fetched=_store_fetched)
    st.session_state.submission = SubmissionClient(api, on_submitted=_on_submitted)
    st.session_state.dashboard.fetch()


def render_form() -> None:
    st.subheader("Submit Feedback")

    # Виджеты уже созданы к моменту отправки, поэтому сброс идёт на следующем прогоне
    reset = st.session_state.pop("reset_form", False)
    for key, value in FORM_DEFAULTS.items():
        if reset or key not in st.session_state:
            st.session_state[key] = value

    notice = st.session_state.pop("form_notice", None)
    if notice:
        st.success(notice)

    with st.form("feedback_form"):
        name = st.text_input("Name", key="form_name")
        email = st.text_input("Email", key="form_email")
        feedback = st.text_area("Feedback", key="form_feedback")
        category = st.selectbox(
            "Category",
            list(FeedbackCategory),
            key="form_category",
            format_func=lambda c: c.label,
        )
        submitted = st.form_submit_button("Submit Feedback")

    if not submitted:
        return

    form = FeedbackForm(name=name, email=email, feedback=feedback, category=category)
    result = st.session_state.submission.submit(form)
    if result.success:
        st.session_state.reset_form = True
        st.session_state.form_notice = "Thank you! Your feedback has been submitted."
        st.rerun()
    elif result.field_errors:
        for message in result.field_errors.values():
            st.error(message)
    else:
        st.error(result.error)


def render_dashboard() -> None:
    dashboard: FeedbackDashboard = st.session_state.dashboard

    head, refresh = st.columns([6, 1])
    with head:
        st.subheader("Feedback Dashboard")
    with refresh:
        if st.button("Refresh", disabled=dashboard.loading):
            dashboard.fetch()

    c1, c2, c3 = st.columns(3)
    c1.metric("Total Results", dashboard.total_results)
    c2.metric("Active Filter", dashboard.active_filter_label)
    c3.metric("Sort Order", dashboard.sort_label)

    f1, f2, f3 = st.columns(3)
    with f1:
        search = st.text_input("Search Feedback", value=dashboard.search_query)
        if search != dashboard.search_query:
            dashboard.set_search_query(search)
    with f2:
        category = st.selectbox(
            "Filter by Category",
            CATEGORY_OPTIONS,
            index=CATEGORY_OPTIONS.index(dashboard.filter_category),
            format_func=lambda c: format_category_name(c) if c else "All Categories",
        )
        if category != dashboard.filter_category:
            dashboard.set_filter_category(category)
    with f3:
        sort_keys = list(SORT_OPTIONS)
        sort_by = st.selectbox(
            "Sort By",
            sort_keys,
            index=sort_keys.index(dashboard.sort_by),
            format_func=SORT_OPTIONS.get,
        )
        if sort_by != dashboard.sort_by:
            dashboard.set_sort_by(sort_by)

    if dashboard.error:
        st.error(dashboard.error)
        return

    if not dashboard.filtered_list:
        st.info("No feedback found.")
        if dashboard.search_query or dashboard.filter_category:
            st.caption("Try adjusting your filters or search terms.")
        return

    # Пагинатор под таблицей, но страница должна учитывать его выбор уже в этом прогоне
    table_slot = st.container()

    p1, p2 = st.columns(2)
    with p1:
        rows_per_page = st.selectbox(
            "Rows per page",
            ROWS_PER_PAGE_OPTIONS,
            index=ROWS_PER_PAGE_OPTIONS.index(dashboard.rows_per_page),
        )
        if rows_per_page != dashboard.rows_per_page:
            dashboard.set_rows_per_page(rows_per_page)
    with p2:
        page = st.number_input(
            "Page",
            min_value=1,
            max_value=dashboard.page_count,
            value=min(dashboard.page + 1, dashboard.page_count),
        )
        if page - 1 != dashboard.page:
            dashboard.set_page(page - 1)

    rows = [
        {
            "Name": item.get("name"),
            "Email": item.get("email"),
            "Feedback": item.get("feedback"),
            "Category": format_category_name(item.get("category") or "other"),
            "Timestamp": pd.to_datetime(item.get("timestamp")),
        }
        for item in dashboard.page_rows()
    ]
    # Высота таблицы не прыгает на последней неполной странице
    rows.extend({} for _ in range(dashboard.empty_rows))
    with table_slot:
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)


def pie_chart(df: pd.DataFrame) -> alt.LayerChart:
    """Доли категорий с подписями процентов."""
    base = alt.Chart(df).encode(
        theta=alt.Theta("Count:Q", stack=True),
        color=alt.Color("Category:N", legend=alt.Legend(title=None)),
        tooltip=["Category", "Count", alt.Tooltip("Percentage:Q", format=".1f")],
    )
    arcs = base.mark_arc(outerRadius=110)
    labels = base.transform_calculate(
        label="format(datum.Percentage, '.1f') + '%'"
    ).mark_text(radius=135).encode(text="label:N")
    return arcs + labels


def render_analysis() -> None:
    st.subheader("Feedback Analysis")

    analysis = analyze_feedback(st.session_state.feedback_data)
    if analysis.is_empty:
        st.caption("No feedback data available for analysis. Submit feedback to see insights here.")
        return

    c1, c2 = st.columns(2)
    c1.metric("Total Feedback", analysis.total)
    c2.metric("Most Common", analysis.most_common_label)

    df = analysis.to_dataframe()
    pie_tab, bar_tab, table_tab = st.tabs(["Pie Chart", "Bar Chart", "Breakdown"])
    with pie_tab:
        st.altair_chart(pie_chart(df), use_container_width=True)
    with bar_tab:
        st.bar_chart(df, x="Category", y="Count")
    with table_tab:
        st.dataframe(df, use_container_width=True, hide_index=True)


def main() -> None:
    st.set_page_config(page_title="Customer Feedback Portal", layout="wide")
    init_state()

    st.title("Customer Feedback Portal")

    left, right = st.columns([1, 2])
    with left:
        render_form()
    analysis_slot = right.container()

    render_dashboard()

    # Аналитика строится по выборке после возможного перезапроса дашборда
    with analysis_slot:
        render_analysis()


main()
