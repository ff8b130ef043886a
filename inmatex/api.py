"""
API module for Inmate Extract.

This module runs one inmate search against the county site and extracts
the booking record of every match.
"""

from typing import Any, Callable, Dict, List, Optional

from inmatex.config import Config
from inmatex.log import get_logger
from inmatex.model import FetchError, InmateSummary, InputError
from inmatex.pipeline import extract_booking, extract_booking_html
from inmatex.results import parse_search_results
from inmatex.rows import extract_rows
from inmatex.web import PageSession, create_session

logger = get_logger(__name__)


class ScrapeResult:
    """Result of one inmate search."""

    def __init__(self, query: str, mode: str, inmates: List[Dict[str, Any]],
                 error: Optional[str] = None):
        self.query = query
        self.mode = mode
        self.inmates = inmates
        self.error = error

    @property
    def found(self) -> bool:
        return bool(self.inmates) and self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert search result to dictionary."""
        result = {
            "found": self.found,
            "query": self.query,
            "mode": self.mode,
            "count": len(self.inmates),
            "inmates": self.inmates,
        }
        if self.error is not None:
            result["error"] = self.error
        return result


def clean_query(name: Any) -> str:
    """
    Validate and clean the name to search for.

    Workflow engines sometimes pass expressions through unevaluated, leaving
    a leading "=" on the value; it is dropped.

    Args:
        name: Name received from the caller

    Returns:
        Cleaned name

    Raises:
        InputError: If the name is missing or not a string
    """
    if not isinstance(name, str):
        raise InputError("name required")

    cleaned = name.strip()
    if cleaned.startswith("="):
        cleaned = cleaned[1:].strip()
    if not cleaned:
        raise InputError("name required")
    return cleaned


def resolve_mode(mode: Any, cfg: Config) -> str:
    """
    Resolve the search mode passed to the site's mode dropdown.

    Args:
        mode: Mode received from the caller, or None
        cfg: Configuration

    Returns:
        Mode value

    Raises:
        InputError: If the mode is not a string or not an accepted value
    """
    if mode is None or (isinstance(mode, str) and not mode.strip()):
        return cfg.site.default_mode
    if not isinstance(mode, str):
        raise InputError("mode must be a string")

    mode = mode.strip()
    accepted = cfg.site.accepted_modes
    if accepted and mode not in accepted:
        raise InputError(f"mode must be one of: {', '.join(accepted)}")
    return mode


def run_search(session: PageSession, cfg: Config, query: str, mode: str) -> List[InmateSummary]:
    """
    Load the search form, submit a search and parse the results page.

    Args:
        session: Started page session
        cfg: Configuration
        query: Cleaned name
        mode: Search mode

    Returns:
        Inmate summaries of the results page
    """
    site = cfg.site
    session.open(site.search_url)
    session.fill(site.name_field, query)
    session.select(site.mode_field, mode)
    session.submit()
    return parse_search_results(extract_rows(session.content()), cfg.results)


def return_to_results(session: PageSession, cfg: Config, query: str, mode: str,
                      expected: List[InmateSummary]) -> None:
    """
    Get back to the results page before clicking the next detail button.

    Buttons are clicked by position, so the results page must list the
    same inmates in the same order as the first time.

    Args:
        session: Page session showing a detail page
        cfg: Configuration
        query: Cleaned name
        mode: Search mode
        expected: Summaries of the first results page

    Raises:
        FetchError: If the results page changed
    """
    if cfg.site.reload_results:
        summaries = run_search(session, cfg, query, mode)
    else:
        session.back()
        summaries = parse_search_results(extract_rows(session.content()), cfg.results)

    if [s["soid"] for s in summaries] != [s["soid"] for s in expected]:
        raise FetchError("Search results changed between detail pages")


def scrape(
    name: Any,
    cfg: Config,
    mode: Any = None,
    session_factory: Callable[[Config], PageSession] = create_session,
) -> ScrapeResult:
    """
    Search the site for a name and extract every match's booking record.

    Detail pages are visited one at a time in the same session. Between
    them the session goes back to the results page, or re-runs the search
    when ``site.reload_results`` is set. Navigation failures do not raise;
    they are returned as a result with an error.

    Args:
        name: Name to search for
        cfg: Configuration
        mode: Search mode, defaults to ``site.default_mode``
        session_factory: Builds the page session

    Returns:
        Scrape result

    Raises:
        InputError: If the name or mode is invalid
    """
    query = clean_query(name)
    mode = resolve_mode(mode, cfg)
    site = cfg.site
    inmates: List[Dict[str, Any]] = []

    logger.info(f"Searching for '{query}' (mode {mode})")

    try:
        with session_factory(cfg) as session:
            summaries = run_search(session, cfg, query, mode)
            if not summaries:
                logger.info(f"No inmates found for '{query}'")
                return ScrapeResult(query, mode, [])

            buttons = session.count_buttons(site.detail_button)
            visits = min(len(summaries), buttons, site.max_details)
            if visits < len(summaries):
                logger.warning(
                    f"Visiting {visits} of {len(summaries)} detail pages "
                    f"({buttons} detail buttons, limit {site.max_details})"
                )

            for index, summary in enumerate(summaries):
                if index >= visits:
                    inmates.append(extract_booking([], summary, cfg))
                    continue

                if index > 0:
                    return_to_results(session, cfg, query, mode, summaries)
                session.click_button(site.detail_button, index)
                logger.info(f"Extracting detail page for SOID {summary['soid']}")
                inmates.append(extract_booking_html(session.content(), summary, cfg))

    except Exception as e:
        logger.exception(f"Scrape failed for '{query}': {e}")
        return ScrapeResult(query, mode, inmates, error=str(e))

    logger.info(f"Extracted {len(inmates)} inmate records for '{query}'")
    return ScrapeResult(query, mode, inmates)
