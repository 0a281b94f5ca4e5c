"""Get From Web component tests — httpx mocked with respx."""

import httpx
import respx

from csvulture.host.component import ComponentPhase, RuntimeMessageLevel
from csvulture.plugins.get_from_web import GetFromWeb

URL = "https://api.example.com/export.csv"


def make_fetcher(document, url=None, auth=None) -> GetFromWeb:
    fetcher = document.add_component(GetFromWeb(settings=document.settings))
    if url is not None:
        document.set_input_data(fetcher, "URL", url)
    if auth is not None:
        document.set_input_data(fetcher, "Authorization Header", auth)
    return fetcher


def test_fetches_body_into_data_output(document):
    fetcher = make_fetcher(document, URL)

    with respx.mock:
        route = respx.get(URL).mock(return_value=httpx.Response(200, text="a,b\n1,2"))
        document.new_solution()

    assert fetcher.phase is ComponentPhase.COMPUTED
    assert fetcher.params.output["Data"].volatile_data == ["a,b\n1,2"]
    assert "Authorization" not in route.calls.last.request.headers


def test_authorization_header_passed_through(document):
    make_fetcher(document, URL, auth="Token s3cret")

    with respx.mock:
        route = respx.get(URL).mock(return_value=httpx.Response(200, text="ok"))
        document.new_solution()

    assert route.calls.last.request.headers["Authorization"] == "Token s3cret"


def test_unreachable_url_fails_without_output(document):
    fetcher = make_fetcher(document, URL)

    with respx.mock:
        respx.get(URL).mock(side_effect=httpx.ConnectError)
        document.new_solution()

    assert fetcher.phase is ComponentPhase.FAILED
    assert isinstance(fetcher.last_error, httpx.ConnectError)
    assert fetcher.params.output["Data"].volatile_data == []
    assert fetcher.messages(RuntimeMessageLevel.ERROR)


def test_error_status_fails(document):
    fetcher = make_fetcher(document, URL)

    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(503))
        document.new_solution()

    assert fetcher.phase is ComponentPhase.FAILED
    assert isinstance(fetcher.last_error, httpx.HTTPStatusError)


def test_missing_url_is_not_fetched(document):
    fetcher = make_fetcher(document)
    document.new_solution()
    assert fetcher.messages(RuntimeMessageLevel.WARNING) == ["Input parameter URL failed to collect data"]
    assert fetcher.params.output["Data"].volatile_data == []


def test_one_request_per_url(document):
    fetcher = make_fetcher(document, [URL, "https://api.example.com/other.csv"])

    with respx.mock:
        respx.get(URL).mock(return_value=httpx.Response(200, text="first"))
        respx.get("https://api.example.com/other.csv").mock(return_value=httpx.Response(200, text="second"))
        document.new_solution()

    assert fetcher.params.output["Data"].volatile_data == ["first", "second"]
