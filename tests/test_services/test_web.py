"""HTTP fetch tests — httpx calls mocked with respx."""

import httpx
import pytest
import respx

from csvulture.services.web import fetch_text

URL = "https://data.example.com/table.csv"


def test_fetch_text_returns_body(settings):
    with respx.mock:
        route = respx.get(URL).mock(return_value=httpx.Response(200, text="a,b\n1,2"))
        body = fetch_text(URL, settings=settings)

    assert body == "a,b\n1,2"
    assert route.called


def test_authorization_sent_verbatim(settings):
    with respx.mock:
        route = respx.get(URL).mock(return_value=httpx.Response(200, text="ok"))
        fetch_text(URL, "Bearer abc.def", settings=settings)

    assert route.calls.last.request.headers["Authorization"] == "Bearer abc.def"


def test_empty_authorization_not_sent(settings):
    with respx.mock:
        route = respx.get(URL).mock(return_value=httpx.Response(200, text="ok"))
        fetch_text(URL, "", settings=settings)

    request = route.calls.last.request
    assert "Authorization" not in request.headers
    assert request.headers["User-Agent"] == settings.http_user_agent


def test_non_2xx_raises(settings):
    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(404, text="nope"))
        with pytest.raises(httpx.HTTPStatusError):
            fetch_text(URL, settings=settings)


def test_transport_error_raises(settings):
    with respx.mock:
        respx.get(URL).mock(side_effect=httpx.ConnectError)
        with pytest.raises(httpx.ConnectError):
            fetch_text(URL, settings=settings)


def test_redirects_are_followed(settings):
    with respx.mock:
        respx.get("https://old.example.com/t.csv").mock(
            return_value=httpx.Response(301, headers={"Location": URL})
        )
        respx.get(URL).mock(return_value=httpx.Response(200, text="moved"))
        assert fetch_text("https://old.example.com/t.csv", settings=settings) == "moved"
