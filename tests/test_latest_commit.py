from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
import pytest

from core.libraries.descriptors import get_latest_commit_to_libraries
from core.libraries.settings import LibrariesSettings

_SETTINGS = LibrariesSettings(
    github_api_prefix="https://api.example.test/repos/org/kernel",
    github_raw_prefix="https://raw.example.test/org/kernel",
    libraries_dir="libraries",
    default_ref="master",
)

_COMMITS = [
    {"sha": "abc123", "commit": {"committer": {"date": "2024-03-01T10:00:00Z"}}},
    {"sha": "def456", "commit": {"committer": {"date": "2024-02-01T10:00:00Z"}}},
]


def _client(
    handler: Callable[[httpx.Request], httpx.Response], requests: list[httpx.Request]
) -> httpx.Client:
    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return httpx.Client(transport=httpx.MockTransport(recording))


def test_returns_newest_commit_sha_and_timestamp() -> None:
    requests: list[httpx.Request] = []
    with _client(lambda request: httpx.Response(200, json=_COMMITS), requests) as client:
        result = get_latest_commit_to_libraries("master", settings=_SETTINGS, client=client)

    assert result == ("abc123", "2024-03-01T10:00:00Z")
    assert len(requests) == 1
    assert requests[0].url.path == "/repos/org/kernel/commits"
    assert requests[0].url.params["path"] == "libraries"
    assert requests[0].url.params["sha"] == "master"
    assert "since" not in requests[0].url.params


def test_empty_filtered_result_retries_once_without_since() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if "since" in request.url.params:
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=_COMMITS)

    with _client(handler, requests) as client:
        result = get_latest_commit_to_libraries(
            "v1", "2024-04-01T00:00:00Z", settings=_SETTINGS, client=client
        )

    assert result == ("abc123", "2024-03-01T10:00:00Z")
    assert [request.url.params.get("since") for request in requests] == [
        "2024-04-01T00:00:00Z",
        None,
    ]


def test_empty_unfiltered_result_gives_none(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="libresolve.libraries")
    requests: list[httpx.Request] = []
    with _client(lambda request: httpx.Response(200, json=[]), requests) as client:
        result = get_latest_commit_to_libraries("master", settings=_SETTINGS, client=client)

    assert result is None
    assert len(requests) == 1
    assert any('"event":"commit_check_empty"' in record.message for record in caplog.records)


def test_http_error_is_logged_and_mapped_to_none(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="libresolve.libraries")
    requests: list[httpx.Request] = []
    with _client(lambda request: httpx.Response(500, text="boom"), requests) as client:
        result = get_latest_commit_to_libraries("master", settings=_SETTINGS, client=client)

    assert result is None
    messages = [record.message for record in caplog.records]
    assert any(
        '"event":"commit_check_failed"' in message and '"error_type":"HTTPStatusError"' in message
        for message in messages
    )


def test_transport_error_is_mapped_to_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with _client(handler, []) as client:
        assert get_latest_commit_to_libraries("master", settings=_SETTINGS, client=client) is None


def test_invalid_api_url_is_logged_and_mapped_to_none(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="libresolve.libraries")
    settings = _SETTINGS.model_copy(
        update={"github_api_prefix": "https://api.example.test/re\npos/org/kernel"}
    )
    requests: list[httpx.Request] = []
    with _client(lambda request: httpx.Response(200, json=_COMMITS), requests) as client:
        result = get_latest_commit_to_libraries("master", settings=settings, client=client)

    assert result is None
    assert requests == []
    messages = [record.message for record in caplog.records]
    assert any(
        '"event":"commit_check_failed"' in message and '"error_type":"InvalidURL"' in message
        for message in messages
    )


def test_since_with_utc_offset_is_sent_verbatim() -> None:
    requests: list[httpx.Request] = []
    with _client(lambda request: httpx.Response(200, json=_COMMITS), requests) as client:
        get_latest_commit_to_libraries(
            "master", "2024-04-01T00:00:00+00:00", settings=_SETTINGS, client=client
        )

    assert requests[0].url.params["since"] == "2024-04-01T00:00:00+00:00"


def test_ref_with_query_delimiters_stays_one_parameter() -> None:
    requests: list[httpx.Request] = []
    with _client(lambda request: httpx.Response(200, json=_COMMITS), requests) as client:
        get_latest_commit_to_libraries("feat&x=1#frag", settings=_SETTINGS, client=client)

    params = requests[0].url.params
    assert params["sha"] == "feat&x=1#frag"
    assert "x" not in params
    assert params["path"] == "libraries"


def test_ref_with_control_character_is_percent_encoded() -> None:
    requests: list[httpx.Request] = []
    with _client(lambda request: httpx.Response(200, json=_COMMITS), requests) as client:
        result = get_latest_commit_to_libraries("mas\nter", settings=_SETTINGS, client=client)

    assert result == ("abc123", "2024-03-01T10:00:00Z")
    assert requests[0].url.params["sha"] == "mas\nter"
    assert b"sha=mas%0Ater" in requests[0].url.query


def test_invalid_json_body_is_mapped_to_none() -> None:
    with _client(lambda request: httpx.Response(200, text="<html>"), []) as client:
        assert get_latest_commit_to_libraries("master", settings=_SETTINGS, client=client) is None


def test_unexpected_payload_shape_is_mapped_to_none() -> None:
    payload = {"message": "Not Found"}
    with _client(lambda request: httpx.Response(200, json=payload), []) as client:
        assert get_latest_commit_to_libraries("master", settings=_SETTINGS, client=client) is None
