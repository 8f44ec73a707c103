"""Streamlit page driven through AppTest with the API client stubbed out."""
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from feedback_portal.clients import FeedbackApiClient
from feedback_portal.feedback.schemas import FeedbackCategory

APP_PATH = Path(__file__).resolve().parents[1] / "feedback_portal" / "ui" / "app.py"
TIMEOUT = 30


def make_record(i, category="other"):
    return {
        "id": str(i),
        "name": f"User {i}",
        "email": f"user{i}@example.com",
        "feedback": f"Feedback {i}",
        "category": category,
        "timestamp": f"2026-10-{i:02d}T10:00:00+00:00",
    }


@pytest.fixture
def backend(monkeypatch):
    """Records served to the page and payloads it submitted."""
    state = {"records": [], "submitted": []}

    def list_feedback(self, category=None, sort_by=None):
        return list(state["records"])

    def submit_feedback(self, payload):
        record = {"id": str(len(state["records"]) + 1), "timestamp": "2026-10-17T10:00:00+00:00", **payload}
        state["records"].append(record)
        state["submitted"].append(payload)
        return record

    monkeypatch.setattr(FeedbackApiClient, "list_feedback", list_feedback)
    monkeypatch.setattr(FeedbackApiClient, "submit_feedback", submit_feedback)
    return state


def run_app():
    at = AppTest.from_file(str(APP_PATH), default_timeout=TIMEOUT)
    at.run()
    assert not at.exception
    return at


def submit_button(at):
    return next(b for b in at.button if b.label == "Submit Feedback")


def test_form_is_cleared_after_successful_submit(backend):
    at = run_app()

    at.text_input(key="form_name").input("Alice")
    at.text_input(key="form_email").input("alice@example.com")
    at.text_area(key="form_feedback").input("Great service")
    at.selectbox(key="form_category").select_index(list(FeedbackCategory).index(FeedbackCategory.BUG_REPORT))
    submit_button(at).click()
    at.run()

    assert not at.exception
    assert backend["submitted"] == [
        {"name": "Alice", "email": "alice@example.com", "feedback": "Great service", "category": "bug_report"}
    ]
    assert at.text_input(key="form_name").value == ""
    assert at.text_input(key="form_email").value == ""
    assert at.text_area(key="form_feedback").value == ""
    assert at.session_state["form_category"] == FeedbackCategory.OTHER
    assert [s.value for s in at.success] == ["Thank you! Your feedback has been submitted."]


def test_form_keeps_input_when_submit_is_rejected(backend):
    at = run_app()

    at.text_input(key="form_name").input("Alice")
    at.text_input(key="form_email").input("not-an-email")
    at.text_area(key="form_feedback").input("Great service")
    submit_button(at).click()
    at.run()

    assert backend["submitted"] == []
    assert at.text_input(key="form_name").value == "Alice"
    assert at.text_input(key="form_email").value == "not-an-email"
    assert "Email is invalid" in [e.value for e in at.error]
    assert not at.success


def test_analysis_offers_pie_chart_tab(backend):
    backend["records"] = [make_record(1, "bug_report"), make_record(2, "bug_report"), make_record(3, "suggestion")]

    at = run_app()

    assert [t.label for t in at.tabs] == ["Pie Chart", "Bar Chart", "Breakdown"]


def test_analysis_is_hidden_without_feedback(backend):
    at = run_app()

    assert not at.tabs


def dashboard_table(at):
    return next(df.value for df in at.dataframe if "Name" in df.value.columns)


def test_last_page_is_padded_to_full_height(backend):
    backend["records"] = [make_record(i) for i in range(1, 8)]

    at = run_app()
    assert dashboard_table(at)["Name"].tolist() == [f"User {i}" for i in range(1, 6)]

    at.number_input[0].set_value(2)
    at.run()

    table = dashboard_table(at)
    assert len(table) == 5
    assert table["Name"].tolist()[:2] == ["User 6", "User 7"]
    assert table["Name"].iloc[2:].isna().all()
