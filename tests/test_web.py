"""
Tests for the page session module.
"""

from unittest import mock

import pytest
import requests
from bs4 import BeautifulSoup

from inmatex.config import BrowserConfig, Config
from inmatex.model import ConfigError, FetchError
from inmatex.web import (
    PlaywrightSession,
    RequestsSession,
    create_session,
    find_buttons,
    form_data,
)
from tests.test_helpers import SEARCH_FORM_HTML

SEARCH_URL = "http://site.test/enter_name.shtm"
RESULTS_URL = "http://site.test/inmate_search.asp"
DETAIL_URL = "http://site.test/InmDetails.asp"


def make_response(url, text=""):
    """Create a mock response."""
    response = mock.MagicMock()
    response.url = url
    response.text = text
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def http():
    """Create a mock requests session."""
    session = mock.MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def browser_config():
    return BrowserConfig(backend="requests", max_retries=2, backoff_factor=1.0)


def test_user_agent_header(http, browser_config):
    RequestsSession(browser_config, http)

    assert http.headers["User-Agent"] == browser_config.user_agent


def test_search_form_submission(http, browser_config, results_html):
    """Test filling and submitting the search form."""
    http.request.side_effect = [
        make_response(SEARCH_URL, SEARCH_FORM_HTML),
        make_response(RESULTS_URL, results_html),
    ]
    session = RequestsSession(browser_config, http)

    session.open(SEARCH_URL)
    session.fill("inmate_name", "DOE JOHN")
    session.select("qry", "Inquiry")
    session.submit()

    assert http.request.call_args_list == [
        mock.call("GET", SEARCH_URL, timeout=60.0),
        mock.call(
            "POST",
            RESULTS_URL,
            timeout=60.0,
            data={"inmate_name": "DOE JOHN", "qry": "Inquiry"},
        ),
    ]
    assert session.content() == results_html


def test_detail_button_navigation(http, browser_config, results_html, detail_html):
    """Test clicking the second detail button and going back."""
    http.request.side_effect = [
        make_response(RESULTS_URL, results_html),
        make_response(DETAIL_URL, detail_html),
    ]
    session = RequestsSession(browser_config, http)
    session.open(RESULTS_URL)

    assert session.count_buttons("Last Known Booking") == 2

    session.click_button("Last Known Booking", 1)

    method, url = http.request.call_args[0]
    assert method == "POST"
    assert url == DETAIL_URL
    assert http.request.call_args[1]["data"] == {
        "soid": "007654321",
        "BOOKING_ID": "222",
        "submit": "Last Known Booking",
    }
    assert session.content() == detail_html

    session.back()
    assert session.content() == results_html

    with pytest.raises(FetchError):
        session.back()


def test_click_missing_button(http, browser_config, no_results_html):
    http.request.return_value = make_response(RESULTS_URL, no_results_html)
    session = RequestsSession(browser_config, http)
    session.open(RESULTS_URL)

    assert session.count_buttons("Last Known Booking") == 0
    with pytest.raises(FetchError):
        session.click_button("Last Known Booking", 0)


def test_submit_without_form(http, browser_config):
    http.request.return_value = make_response(SEARCH_URL, "<html><body>Down</body></html>")
    session = RequestsSession(browser_config, http)
    session.open(SEARCH_URL)

    with pytest.raises(FetchError, match="No form found"):
        session.submit()


def test_get_form_uses_query_params(http, browser_config):
    page = '<form action="/search"><input name="q" value="x"><input type="submit" value="Go"></form>'
    http.request.side_effect = [
        make_response(SEARCH_URL, page),
        make_response("http://site.test/search?q=DOE", ""),
    ]
    session = RequestsSession(browser_config, http)
    session.open(SEARCH_URL)
    session.fill("q", "DOE")
    session.submit()

    assert http.request.call_args == mock.call(
        "GET", "http://site.test/search", timeout=60.0, params={"q": "DOE"}
    )


@mock.patch("inmatex.web.time.sleep")
def test_retry_then_success(mock_sleep, http, browser_config):
    """Test that a failed request is retried with backoff."""
    http.request.side_effect = [
        requests.exceptions.ConnectionError("refused"),
        make_response(SEARCH_URL, SEARCH_FORM_HTML),
    ]
    session = RequestsSession(browser_config, http)

    session.open(SEARCH_URL)

    assert http.request.call_count == 2
    mock_sleep.assert_called_once_with(1.0)
    assert session.content() == SEARCH_FORM_HTML


@mock.patch("inmatex.web.time.sleep")
def test_retries_exhausted(mock_sleep, http, browser_config):
    """Test that FetchError is raised after every attempt failed."""
    http.request.side_effect = requests.exceptions.Timeout("slow")
    session = RequestsSession(browser_config, http)

    with pytest.raises(FetchError, match="after 3 attempts"):
        session.open(SEARCH_URL)

    assert http.request.call_count == 3
    assert [c[0][0] for c in mock_sleep.call_args_list] == [1.0, 2.0]


@mock.patch("inmatex.web.time.sleep")
def test_http_error_is_retried(mock_sleep, http, browser_config):
    failed = make_response(SEARCH_URL)
    failed.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
    http.request.side_effect = [failed, make_response(SEARCH_URL, "ok")]
    session = RequestsSession(browser_config, http)

    session.open(SEARCH_URL)

    assert session.content() == "ok"


def test_close(http, browser_config):
    RequestsSession(browser_config, http).close()

    http.close.assert_called_once()


def test_form_data():
    """Test collecting the values a browser would submit."""
    soup = BeautifulSoup(
        """
        <form>
          <input type="hidden" name="soid" value="001234567">
          <input type="text" name="inmate_name">
          <input type="checkbox" name="all">
          <input type="checkbox" name="active" checked>
          <input type="submit" name="submit" value="Search">
          <select name="qry">
            <option value="In Custody">In Custody</option>
            <option value="Inquiry" selected>Inquiry</option>
          </select>
          <textarea name="note">hi</textarea>
        </form>
        """,
        "html.parser",
    )

    assert form_data(soup.form) == {
        "soid": "001234567",
        "inmate_name": "",
        "active": "on",
        "qry": "Inquiry",
        "note": "hi",
    }


def test_find_buttons():
    soup = BeautifulSoup(
        '<input type="submit" value="Last Known Booking">'
        '<input type="hidden" value="Last Known Booking">'
        "<button>Last Known Booking</button>",
        "html.parser",
    )

    assert len(find_buttons(soup, "Last Known Booking")) == 2


@mock.patch("inmatex.web.sync_playwright")
def test_playwright_session_lifecycle(mock_sync_playwright):
    """Test that the browser and driver are stopped on exit."""
    pw = mock_sync_playwright.return_value.start.return_value
    browser = pw.chromium.launch.return_value
    page = browser.new_context.return_value.new_page.return_value

    with PlaywrightSession(BrowserConfig()) as session:
        assert session.page is page

    pw.chromium.launch.assert_called_once_with(
        headless=True, args=["--no-sandbox", "--disable-dev-shm-usage"]
    )
    page.set_default_timeout.assert_called_once_with(60000)
    browser.close.assert_called_once()
    pw.stop.assert_called_once()


@mock.patch("inmatex.web.sync_playwright")
def test_playwright_launch_failure_stops_driver(mock_sync_playwright):
    """Test that a failed browser launch does not leave the driver running."""
    pw = mock_sync_playwright.return_value.start.return_value
    pw.chromium.launch.side_effect = RuntimeError("no chromium")

    with pytest.raises(RuntimeError, match="no chromium"):
        with PlaywrightSession(BrowserConfig()):
            pass

    pw.stop.assert_called_once()


@mock.patch("inmatex.web.sync_playwright")
def test_playwright_context_failure_closes_browser(mock_sync_playwright):
    pw = mock_sync_playwright.return_value.start.return_value
    browser = pw.chromium.launch.return_value
    browser.new_context.side_effect = RuntimeError("bad user agent")
    session = PlaywrightSession(BrowserConfig())

    with pytest.raises(RuntimeError):
        session.start()

    browser.close.assert_called_once()
    pw.stop.assert_called_once()
    assert session._playwright is None


class TestCreateSession:
    """Test backend selection."""

    def test_playwright(self):
        assert isinstance(create_session(Config()), PlaywrightSession)

    def test_requests(self):
        session = create_session(Config(browser={"backend": "Requests"}))
        try:
            assert isinstance(session, RequestsSession)
        finally:
            session.close()

    def test_unknown(self):
        with pytest.raises(ConfigError):
            create_session(Config(browser={"backend": "lynx"}))
