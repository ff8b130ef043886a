"""
Page sessions for driving the inmate search site.

A page session loads a URL, fills and submits the search form, clicks the
per-inmate detail buttons and hands back the rendered HTML. Two backends
are provided: a headless Chromium driven by Playwright, and a plain HTTP
session that serializes the site's forms itself.
"""

import time
from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup
from playwright.sync_api import sync_playwright

from inmatex.config import BrowserConfig, Config
from inmatex.log import get_logger
from inmatex.model import ConfigError, FetchError
from inmatex.rows import clean_text

logger = get_logger(__name__)

BUTTON_INPUT_TYPES = {"submit", "button", "image"}
SKIPPED_INPUT_TYPES = {"submit", "button", "image", "reset", "file"}


class PageSession:
    """
    Base class for page sessions. Use as a context manager.
    """

    def start(self) -> "PageSession":
        return self

    def open(self, url: str) -> None:
        raise NotImplementedError

    def fill(self, field: str, value: str) -> None:
        raise NotImplementedError

    def select(self, field: str, value: str) -> None:
        raise NotImplementedError

    def submit(self) -> None:
        raise NotImplementedError

    def count_buttons(self, value: str) -> int:
        raise NotImplementedError

    def click_button(self, value: str, index: int = 0) -> None:
        raise NotImplementedError

    def back(self) -> None:
        raise NotImplementedError

    def content(self) -> str:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "PageSession":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PlaywrightSession(PageSession):
    """
    Page session backed by a headless Chromium browser.
    """

    def __init__(self, cfg: BrowserConfig):
        self.cfg = cfg
        self._playwright = None
        self._browser = None
        self.page = None
        self._last_field: Optional[str] = None

    def start(self) -> "PlaywrightSession":
        logger.info("Launching headless browser")
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self.cfg.headless,
                args=self.cfg.launch_args,
            )
            context = self._browser.new_context(user_agent=self.cfg.user_agent)
            self.page = context.new_page()
            self.page.set_default_timeout(self.cfg.timeout_ms)
        except Exception as e:
            logger.error(f"Browser launch failed: {e}")
            self.close()
            raise
        return self

    def open(self, url: str) -> None:
        logger.info(f"Loading {url}")
        self.page.goto(url, wait_until="domcontentloaded")

    def fill(self, field: str, value: str) -> None:
        self.page.fill(f'input[name="{field}"]', value)
        self._last_field = field

    def select(self, field: str, value: str) -> None:
        self.page.select_option(f'select[name="{field}"]', value)

    def submit(self) -> None:
        with self.page.expect_navigation(wait_until="domcontentloaded"):
            if self._last_field:
                self.page.eval_on_selector(
                    f'input[name="{self._last_field}"]',
                    "el => (el.form || document.querySelector('form')).submit()",
                )
            else:
                self.page.evaluate("() => document.querySelector('form').submit()")
        self.page.wait_for_selector("table")

    def count_buttons(self, value: str) -> int:
        return self.page.locator(f"input[value='{value}']").count()

    def click_button(self, value: str, index: int = 0) -> None:
        buttons = self.page.locator(f"input[value='{value}']")
        if buttons.count() <= index:
            raise FetchError(f"No '{value}' button at position {index}")

        with self.page.expect_navigation(wait_until="domcontentloaded"):
            buttons.nth(index).click()
        self.page.wait_for_selector("body")

    def back(self) -> None:
        self.page.go_back(wait_until="domcontentloaded")
        self.page.wait_for_selector("table")

    def content(self) -> str:
        return self.page.content()

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None


def form_data(form) -> Dict[str, str]:
    """
    Collect the values a browser would submit for a form.

    Args:
        form: BeautifulSoup form element

    Returns:
        Field name to value
    """
    data = {}

    for tag in form.find_all("input"):
        name = tag.get("name")
        input_type = (tag.get("type") or "text").lower()
        if not name or input_type in SKIPPED_INPUT_TYPES:
            continue
        if input_type in ("checkbox", "radio") and not tag.has_attr("checked"):
            continue
        data[name] = tag.get("value", "on" if input_type == "checkbox" else "")

    for tag in form.find_all("select"):
        name = tag.get("name")
        if not name:
            continue
        option = tag.find("option", selected=True) or tag.find("option")
        if option is not None:
            data[name] = option.get("value", clean_text(option.get_text()))

    for tag in form.find_all("textarea"):
        if tag.get("name"):
            data[tag["name"]] = tag.get_text()

    return data


def find_buttons(soup: BeautifulSoup, value: str) -> List:
    """
    Find the submit buttons carrying a given value, in document order.

    Args:
        soup: Parsed page
        value: Button value or label

    Returns:
        Matching button elements
    """
    buttons = []
    for tag in soup.find_all(["input", "button"]):
        if tag.name == "input":
            if (tag.get("type") or "text").lower() not in BUTTON_INPUT_TYPES:
                continue
            label = tag.get("value", "")
        else:
            label = tag.get("value") or clean_text(tag.get_text())
        if label == value:
            buttons.append(tag)
    return buttons


class RequestsSession(PageSession):
    """
    Page session backed by plain HTTP requests.
    """

    def __init__(self, cfg: BrowserConfig, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = cfg.user_agent
        self.url: Optional[str] = None
        self.html = ""
        self.history: List[Tuple[str, str]] = []
        self.fields: Dict[str, str] = {}

    def request_with_retry(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Send a request with retry logic and exponential backoff.

        Args:
            method: HTTP method
            url: URL to request
            **kwargs: Passed to requests

        Returns:
            Successful response

        Raises:
            FetchError: If every attempt failed
        """
        max_retries = self.cfg.max_retries
        last_exception = None

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(
                    method, url, timeout=self.cfg.timeout_ms / 1000, **kwargs
                )
                response.raise_for_status()
                return response
            except requests.exceptions.ConnectionError as e:
                last_exception = e
                logger.warning(f"Connection error for {url} (attempt {attempt + 1}/{max_retries + 1}): {e}")
            except requests.exceptions.Timeout as e:
                last_exception = e
                logger.warning(f"Timeout error for {url} (attempt {attempt + 1}/{max_retries + 1}): {e}")
            except requests.exceptions.RequestException as e:
                last_exception = e
                logger.warning(f"Request error for {url} (attempt {attempt + 1}/{max_retries + 1}): {e}")

            if attempt < max_retries:
                sleep_time = self.cfg.backoff_factor * (2 ** attempt)
                logger.info(f"Retrying in {sleep_time:.1f} seconds...")
                time.sleep(sleep_time)

        raise FetchError(f"Failed to fetch {url} after {max_retries + 1} attempts: {last_exception}")

    def _load(self, method: str, url: str, **kwargs) -> None:
        response = self.request_with_retry(method, url, **kwargs)
        if self.url is not None:
            self.history.append((self.url, self.html))
        self.url = response.url
        self.html = response.text

    def _submit_form(self, form, overrides: Dict[str, str]) -> None:
        data = form_data(form)
        data.update(overrides)

        method = (form.get("method") or "get").upper()
        action = urljoin(self.url or "", form.get("action") or self.url or "")
        logger.info(f"Submitting form to {action}")

        if method == "POST":
            self._load("POST", action, data=data)
        else:
            self._load("GET", action, params=data)

    def open(self, url: str) -> None:
        logger.info(f"Loading {url}")
        self._load("GET", url)
        self.fields = {}

    def fill(self, field: str, value: str) -> None:
        self.fields[field] = value

    def select(self, field: str, value: str) -> None:
        self.fields[field] = value

    def submit(self) -> None:
        soup = BeautifulSoup(self.html, "html.parser")
        forms = soup.find_all("form")
        if not forms:
            raise FetchError(f"No form found on {self.url}")

        form = forms[0]
        for candidate in forms:
            if any(candidate.find(attrs={"name": field}) for field in self.fields):
                form = candidate
                break

        self._submit_form(form, self.fields)
        self.fields = {}

    def count_buttons(self, value: str) -> int:
        return len(find_buttons(BeautifulSoup(self.html, "html.parser"), value))

    def click_button(self, value: str, index: int = 0) -> None:
        buttons = find_buttons(BeautifulSoup(self.html, "html.parser"), value)
        if len(buttons) <= index:
            raise FetchError(f"No '{value}' button at position {index}")

        button = buttons[index]
        form = button.find_parent("form")
        if form is None:
            raise FetchError(f"'{value}' button at position {index} is not inside a form")

        overrides = {}
        if button.get("name"):
            overrides[button["name"]] = button.get("value", "")
        self._submit_form(form, overrides)

    def back(self) -> None:
        if not self.history:
            raise FetchError("No previous page to go back to")
        self.url, self.html = self.history.pop()

    def content(self) -> str:
        return self.html

    def close(self) -> None:
        self.session.close()


def create_session(cfg: Config) -> PageSession:
    """
    Create the page session configured by ``browser.backend``.

    Args:
        cfg: Configuration

    Returns:
        Unstarted page session
    """
    backend = cfg.browser.backend.lower()
    if backend == "playwright":
        return PlaywrightSession(cfg.browser)
    if backend == "requests":
        return RequestsSession(cfg.browser)
    raise ConfigError(f"Unknown browser backend: {cfg.browser.backend}")
