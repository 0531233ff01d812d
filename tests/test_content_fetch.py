"""Tests for the fetch_url_content translator (Jina Reader)."""

from __future__ import annotations

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from core.content_fetch import READER_URL, build_fetch_request, content_fetch_translator
from core.models import FetchRequest

TARGET = "https://example.com/article"

HEADER_FOR_FIELD = {
    "generate_image_alt": ("X-With-Generated-Alt", True, "true"),
    "cookies": ("X-Set-Cookie", "session=abc", "session=abc"),
    "output_format": ("X-Respond-With", "html", "html"),
    "proxy_url": ("X-Proxy-Url", "http://proxy.local:8080", "http://proxy.local:8080"),
    "cache_tolerance": ("X-Cache-Tolerance", 0, "0"),
    "no_cache": ("X-No-Cache", True, "true"),
    "target_selector": ("X-Target-Selector", "main article", "main article"),
    "wait_for_selector": ("X-Wait-For-Selector", "#content", "#content"),
    "timeout": ("X-Timeout", 30, "30"),
    "json_output": ("Accept", True, "application/json"),
}


def test_bare_request_sends_no_optional_headers() -> None:
    plan = build_fetch_request(FetchRequest(url=TARGET), READER_URL)

    assert plan.method == "GET"
    assert plan.headers == {}
    assert plan.form is None


@pytest.mark.parametrize("field_name", sorted(HEADER_FOR_FIELD))
def test_each_field_sets_exactly_its_header(field_name: str) -> None:
    header, value, expected = HEADER_FOR_FIELD[field_name]

    plan = build_fetch_request(FetchRequest(url=TARGET, **{field_name: value}), READER_URL)

    assert plan.headers == {header: expected}


def test_all_fields_together_are_honoured_independently() -> None:
    request = FetchRequest(
        url=TARGET,
        api_key="jina-key",
        **{name: value for name, (_, value, _) in HEADER_FOR_FIELD.items()},
    )

    plan = build_fetch_request(request, READER_URL)

    expected = {header: sent for header, _, sent in HEADER_FOR_FIELD.values()}
    expected["Authorization"] = "Bearer jina-key"
    assert plan.headers == expected


def test_false_flags_send_nothing() -> None:
    request = FetchRequest(url=TARGET, generate_image_alt=False, no_cache=False, json_output=False)

    assert build_fetch_request(request, READER_URL).headers == {}


def test_get_concatenates_target_onto_reader_path() -> None:
    plan = build_fetch_request(FetchRequest(url=TARGET), READER_URL)

    assert plan.url == "https://r.jina.ai/https://example.com/article"
    assert plan.params == []


def test_post_mode_sends_url_as_form_field() -> None:
    url = "https://example.com/app#/settings"

    plan = build_fetch_request(FetchRequest(url=url, use_post_for_url=True), READER_URL)

    assert plan.method == "POST"
    assert plan.url == READER_URL
    assert plan.form == {"url": url}
    assert plan.headers["Content-Type"] == "application/x-www-form-urlencoded"


@pytest.mark.asyncio()
async def test_success_returns_body_verbatim(upstream) -> None:
    fake = upstream(200, "# Title\nBody")
    translator = content_fetch_translator(client_factory=fake)

    result = await translator.invoke(FetchRequest(url=TARGET))

    assert result.is_error is False
    assert result.text == "# Title\nBody"
    assert len(result.content) == 1
    assert result.content[0].type == "text"


@pytest.mark.asyncio()
async def test_get_request_reaches_upstream_unencoded(upstream) -> None:
    fake = upstream(200, "ok")
    translator = content_fetch_translator(client_factory=fake)

    await translator.invoke(FetchRequest(url=TARGET, api_key="k", output_format="text"))

    sent = fake.last
    assert sent.method == "GET"
    assert str(sent.url) == "https://r.jina.ai/https://example.com/article"
    assert sent.headers["Authorization"] == "Bearer k"
    assert sent.headers["X-Respond-With"] == "text"


@pytest.mark.asyncio()
async def test_post_request_body_is_form_encoded(upstream) -> None:
    fake = upstream(200, "ok")
    translator = content_fetch_translator(client_factory=fake)
    url = "https://example.com/page#section"

    await translator.invoke(FetchRequest(url=url, use_post_for_url=True))

    sent = fake.last
    assert sent.method == "POST"
    assert str(sent.url) == READER_URL
    assert parse_qs(sent.content.decode()) == {"url": [url]}


@pytest.mark.asyncio()
async def test_json_output_still_returns_raw_text(upstream) -> None:
    fake = upstream(200, '{"data": {"content": "x"}}')
    translator = content_fetch_translator(client_factory=fake)

    result = await translator.invoke(FetchRequest(url=TARGET, json_output=True))

    assert result.text == '{"data": {"content": "x"}}'


@pytest.mark.asyncio()
async def test_upstream_404_is_an_error_with_status_and_body(upstream) -> None:
    translator = content_fetch_translator(client_factory=upstream(404, "not found"))

    result = await translator.invoke(FetchRequest(url=TARGET))

    assert result.is_error is True
    assert result.text == "Error fetching URL: 404 Not Found. not found"


@pytest.mark.asyncio()
async def test_network_fault_is_an_error_not_an_exception(failing_upstream) -> None:
    translator = content_fetch_translator(client_factory=failing_upstream("ECONNRESET"))

    result = await translator.invoke(FetchRequest(url=TARGET))

    assert result.is_error is True
    assert result.text == "Network error fetching URL: ECONNRESET"


@pytest.mark.asyncio()
async def test_non_ascii_header_value_is_a_network_error(upstream) -> None:
    fake = upstream(200, "unused")
    translator = content_fetch_translator(client_factory=fake)

    result = await translator.invoke(FetchRequest(url=TARGET, target_selector='[title="café"]'))

    assert result.is_error is True
    assert result.text.startswith("Network error fetching URL: ")
    assert fake.requests == []


@pytest.mark.asyncio()
async def test_cancellation_propagates_and_closes_the_client() -> None:
    started = asyncio.Event()
    clients: list[httpx.AsyncClient] = []

    async def hang(_: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.Event().wait()
        raise AssertionError("unreachable")

    def factory() -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(hang))
        clients.append(client)
        return client

    translator = content_fetch_translator(client_factory=factory)
    task = asyncio.create_task(translator.invoke(FetchRequest(url=TARGET)))
    await started.wait()

    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert len(clients) == 1
    assert clients[0].is_closed


@pytest.mark.asyncio()
async def test_same_input_gives_same_envelope(upstream) -> None:
    translator = content_fetch_translator(client_factory=upstream(200, "stable"))
    request = FetchRequest(url=TARGET, no_cache=True)

    first = await translator.invoke(request)
    second = await translator.invoke(request)

    assert first == second
    assert first.is_error is False
    assert [(item.type, item.text) for item in first.content] == [("text", "stable")]


def test_custom_reader_endpoint_is_used() -> None:
    translator = content_fetch_translator(endpoint="http://reader.internal/")

    plan = translator.plan(FetchRequest(url=TARGET))

    assert plan.url == "http://reader.internal/https://example.com/article"
