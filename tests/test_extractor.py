from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Iterator

import pytest
import requests

from contentextract.errors import FetchError
from contentextract.services.extractor import DEFAULT_HEADERS, TextExtractor, html_to_text


class DummyResponse:
    def __init__(
        self,
        text: str | bytes,
        status_code: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> None:
        self.content = text.encode("utf-8") if isinstance(text, str) else text
        self.status_code = status_code
        self.headers = {"Content-Type": content_type}
        self.closed = False
        self.chunks_read = 0

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size: int) -> Iterator[bytes]:
        for start in range(0, len(self.content), chunk_size):
            self.chunks_read += 1
            yield self.content[start : start + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stand-in for :class:`requests.Session` that records every ``get``."""

    def __init__(self, response: DummyResponse | Exception) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, float, bool]] = []
        self._response = response

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info) -> None:
        return None

    def get(self, url, timeout, stream=False):
        self.calls.append((url, timeout, stream))
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


def _extractor_returning(response: DummyResponse | Exception, **kwargs) -> tuple[TextExtractor, FakeSession]:
    session = FakeSession(response)
    return TextExtractor(lambda: session, **kwargs), session


def test_html_to_text_keeps_links_inline_and_skips_images() -> None:
    html = """
    <html>
        <head><title>Story title</title><style>p { color: red; }</style></head>
        <body>
            <script>var tracking = true;</script>
            <p>Read the <a href="/more">full report</a> today.</p>
            <img src="/chart.png" alt="Chart alt text">
        </body>
    </html>
    """

    title, text = html_to_text(html)

    assert title == "Story title"
    assert text == "Read the full report today."


def test_fetch_sends_browser_headers_and_streams() -> None:
    extractor, session = _extractor_returning(DummyResponse("<p>Body.</p>"), timeout=7.5)

    extractor.fetch("https://example.com/article")

    assert session.headers["User-Agent"] == DEFAULT_HEADERS["User-Agent"]
    assert session.calls == [("https://example.com/article", 7.5, True)]


def test_fetch_returns_title_and_text() -> None:
    response = DummyResponse("<html><title>Hello</title><p>Body text here.</p></html>")
    extractor, _ = _extractor_returning(response)

    page = extractor.fetch("https://example.com/article")

    assert page.title == "Hello"
    assert page.text == "Body text here."
    assert response.closed


def test_each_fetch_uses_a_new_session() -> None:
    created: list[FakeSession] = []

    def factory() -> FakeSession:
        session = FakeSession(DummyResponse("<p>Body.</p>"))
        created.append(session)
        return session

    extractor = TextExtractor(factory)
    extractor.fetch("https://example.com/a")
    extractor.fetch("https://example.com/b")

    assert [session.calls[0][0] for session in created] == ["https://example.com/a", "https://example.com/b"]


@pytest.fixture
def cookie_server() -> Iterator[tuple[str, list[str | None]]]:
    """Local server whose ``/login`` sets a cookie and which records the Cookie header it receives."""

    received: list[str | None] = []

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802 - http.server naming
            received.append(self.headers.get("Cookie"))
            body = b"<p>Page body.</p>"
            self.send_response(200)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            if self.path == "/login":
                self.send_header("Set-Cookie", "session=first-caller; Path=/")
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args) -> None:  # noqa: A002 - silence request logging
            return None

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_port}", received
    finally:
        server.shutdown()
        server.server_close()


def test_cookies_are_not_shared_between_fetches(cookie_server) -> None:
    base_url, received = cookie_server
    extractor = TextExtractor()

    extractor.fetch(f"{base_url}/login")
    extractor.fetch(f"{base_url}/other")

    assert received == [None, None]


def test_extract_text_truncates_to_budget() -> None:
    body = "word " * 2000
    extractor, _ = _extractor_returning(DummyResponse(f"<p>{body}</p>"), excerpt_budget=3000)

    text = extractor.extract_text("https://example.com/long")

    assert len(text) == 3000


def test_extract_text_leaves_short_text_untouched() -> None:
    extractor, _ = _extractor_returning(DummyResponse("<p>Short page.</p>"), excerpt_budget=3000)

    assert extractor.extract_text("https://example.com/short") == "Short page."


def test_body_is_read_only_up_to_byte_cap() -> None:
    response = DummyResponse("<p>" + "a" * 500_000 + "</p>")
    extractor, _ = _extractor_returning(response, max_document_bytes=100_000)

    text = extractor.extract_text("https://example.com/huge")

    assert len(text) == 3000
    assert response.chunks_read == 2
    assert response.closed


def test_charset_declared_in_meta_is_honoured() -> None:
    html = '<html><head><meta charset="utf-8"></head><body><p>Café crème brûlée</p></body></html>'
    response = DummyResponse(html.encode("utf-8"), content_type="text/html")
    extractor, _ = _extractor_returning(response)

    assert extractor.extract_text("https://example.com/menu") == "Café crème brûlée"


def test_charset_declared_in_header_is_honoured() -> None:
    response = DummyResponse("<p>Größe</p>".encode("latin-1"), content_type="text/html; charset=ISO-8859-1")
    extractor, _ = _extractor_returning(response)

    assert extractor.extract_text("https://example.com/de") == "Größe"


def test_network_failure_raises_fetch_error() -> None:
    extractor, _ = _extractor_returning(requests.Timeout("timed out"))

    with pytest.raises(FetchError):
        extractor.fetch("https://example.com/slow")


def test_http_error_status_raises_fetch_error() -> None:
    response = DummyResponse("missing", status_code=404)
    extractor, _ = _extractor_returning(response)

    with pytest.raises(FetchError):
        extractor.fetch("https://example.com/missing")

    assert response.closed


def test_binary_content_raises_fetch_error() -> None:
    extractor, _ = _extractor_returning(DummyResponse("%PDF-1.7", content_type="application/pdf"))

    with pytest.raises(FetchError) as excinfo:
        extractor.fetch("https://example.com/file.pdf")

    assert "application/pdf" in str(excinfo.value)
    assert excinfo.value.public_message == "Failed to extract content from the URL."
