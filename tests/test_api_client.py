"""FeedbackApiClient against a mocked HTTP transport."""
import httpx
import pytest

from feedback_portal.clients import FeedbackApiClient, FeedbackApiError


def make_client(handler):
    return FeedbackApiClient(
        base_url="http://api.test",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def test_list_feedback_sends_filter_and_sort():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["path"] = request.url.path
        return httpx.Response(200, json={"success": True, "count": 1, "data": [{"id": "1"}]})

    data = make_client(handler).list_feedback(category="bug_report", sort_by="name:asc")

    assert data == [{"id": "1"}]
    assert seen["path"] == "/feedback"
    assert seen["params"] == {"category": "bug_report", "sortBy": "name:asc"}


def test_list_feedback_omits_empty_params():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"success": True, "count": 0, "data": []})

    make_client(handler).list_feedback(category="", sort_by=None)

    assert seen["params"] == {}


def test_validation_errors_are_carried():
    def handler(request):
        return httpx.Response(400, json={"success": False, "error": ["Please add a name", "Please add an email"]})

    with pytest.raises(FeedbackApiError) as exc:
        make_client(handler).submit_feedback({})

    assert exc.value.status_code == 400
    assert exc.value.is_validation_error
    assert exc.value.errors == ["Please add a name", "Please add an email"]
    assert str(exc.value) == "Please add a name, Please add an email"


def test_server_error_message_is_carried():
    def handler(request):
        return httpx.Response(500, json={"success": False, "error": "Server Error"})

    with pytest.raises(FeedbackApiError) as exc:
        make_client(handler).list_feedback()

    assert exc.value.status_code == 500
    assert exc.value.errors == ["Server Error"]
    assert not exc.value.is_validation_error


def test_transport_failure_raises_api_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FeedbackApiError) as exc:
        make_client(handler).list_feedback()

    assert exc.value.status_code is None
    assert exc.value.errors == []
