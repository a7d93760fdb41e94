"""Thin JSON-over-HTTP helper."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx


def get_json(
    url: str,
    *,
    timeout: float,
    client: httpx.Client | None = None,
    params: Mapping[str, str] | None = None,
) -> Any:
    """GET ``url`` with encoded query ``params`` and decode the JSON body.

    Raises:
        httpx.HTTPError: transport failure or non-2xx status.
        httpx.InvalidURL: ``url`` cannot be turned into a request URL.
        ValueError: the body is not valid JSON.
    """

    if client is not None:
        return _get(client, url, params).json()
    with httpx.Client(timeout=timeout, follow_redirects=True) as owned_client:
        return _get(owned_client, url, params).json()


def get_text(url: str, *, timeout: float, client: httpx.Client | None = None) -> str:
    if client is not None:
        return _get(client, url, None).text
    with httpx.Client(timeout=timeout, follow_redirects=True) as owned_client:
        return _get(owned_client, url, None).text


def _get(client: httpx.Client, url: str, params: Mapping[str, str] | None) -> httpx.Response:
    response = client.get(url, params=params)
    response.raise_for_status()
    return response
