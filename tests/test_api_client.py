"""Tests for the requests-based backend client."""

from unittest.mock import MagicMock

import pytest

from studyhub.client.api_client import ApiError, StudyHubClient
from studyhub.models.stats import WeeklyStats


def _response(status_code=200, body=None, content=True):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = b"{}" if content else b""
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body if body is not None else {}
    return response


AUTH_BODY = {
    "token": "jwt-token",
    "token_type": "bearer",
    "user": {"id": "u1", "name": "Ada", "email": "ada@example.com"},
    "data": {"tasks": [], "stats": None, "profileImage": None, "reminderEnabled": True, "reminderTone": None},
}


@pytest.fixture
def http():
    return MagicMock()


@pytest.fixture
def client(http):
    return StudyHubClient(base_url="http://backend.test/", session=http)


def test_login_stores_token_and_sends_it_afterwards(client, http):
    http.request.return_value = _response(body=AUTH_BODY)
    result = client.login("ada@example.com", "secret123")

    assert result.token == "jwt-token"
    assert result.user.email == "ada@example.com"
    assert result.data.reminder_enabled is True
    assert client.token == "jwt-token"

    method, url = http.request.call_args.args
    assert (method, url) == ("POST", "http://backend.test/api/auth/login")
    assert http.request.call_args.kwargs["json"] == {"email": "ada@example.com", "password": "secret123"}

    http.request.return_value = _response(body={"user": AUTH_BODY["user"]})
    client.me()
    assert http.request.call_args.kwargs["headers"]["Authorization"] == "Bearer jwt-token"


def test_error_detail_becomes_api_error(client, http):
    http.request.return_value = _response(401, {"detail": "Invalid email or password"})

    with pytest.raises(ApiError) as exc_info:
        client.login("ada@example.com", "wrong")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid email or password"
    assert client.token is None


def test_error_without_json_uses_default_message(client, http):
    http.request.return_value = _response(502, ValueError("not json"))

    with pytest.raises(ApiError) as exc_info:
        client.fetch_user_data()

    assert exc_info.value.message == "Failed to fetch data"


def test_validation_error_detail_list_uses_default_message(client, http):
    http.request.return_value = _response(422, {"detail": [{"loc": ["body", "name"], "msg": "Field required"}]})

    with pytest.raises(ApiError) as exc_info:
        client.register("", "ada@example.com", "secret123")

    assert exc_info.value.status_code == 422
    assert exc_info.value.message == "Request failed"


def test_save_user_data_sends_camel_case_blob(client, http, sample_task):
    http.request.return_value = _response(body={"data": {}})
    client.token = "jwt-token"

    client.save_user_data([sample_task], WeeklyStats(hours_today=1.5), reminder_enabled=False)

    method, url = http.request.call_args.args
    payload = http.request.call_args.kwargs["json"]
    assert (method, url) == ("PUT", "http://backend.test/api/user/data")
    assert payload["tasks"][0]["id"] == sample_task.id
    assert "dueDate" in payload["tasks"][0]
    assert payload["stats"]["hoursToday"] == 1.5
    assert payload["reminderEnabled"] is False


def test_save_user_data_omits_unknown_reminder_flag(client, http):
    http.request.return_value = _response(body={"data": {}})

    client.save_user_data([], WeeklyStats())

    assert "reminderEnabled" not in http.request.call_args.kwargs["json"]


def test_logout_handles_empty_body(client, http):
    http.request.return_value = _response(204, content=False)
    client.logout()
