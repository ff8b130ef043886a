"""
Row extraction for Inmate Extract.

This module turns a rendered HTML page into the ordered sequence of table
rows that the extraction pipeline consumes. Legacy sheriff pages nest layout
tables several levels deep, so only rows whose cells hold text directly are
kept; wrapper rows are skipped and their inner rows visited on their own.
"""

import re
from typing import List

from bs4 import BeautifulSoup

from inmatex.log import get_logger
from inmatex.model import Row

logger = get_logger(__name__)

WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """
    Collapse whitespace runs to a single space and trim.

    Args:
        text: Raw cell text

    Returns:
        Cleaned text
    """
    if not text:
        return ""
    return WHITESPACE.sub(" ", text).strip()


def extract_rows(html: str) -> List[Row]:
    """
    Extract table rows from an HTML document.

    Args:
        html: HTML content as string

    Returns:
        Rows in document order
    """
    soup = BeautifulSoup(html or "", "html.parser")
    rows = []

    for tr in soup.find_all("tr"):
        cells = tr.find_all(["td", "th"], recursive=False)
        if not cells:
            continue

        # Layout wrapper; the nested table's rows are visited separately
        if any(cell.find("table") is not None for cell in cells):
            continue

        rows.append(
            Row(
                tuple(clean_text(cell.get_text(" ")) for cell in cells),
                tuple(cell.name == "th" for cell in cells),
            )
        )

    logger.debug(f"Extracted {len(rows)} table rows")
    return rows


def page_text(html: str, limit: int = 8000) -> str:
    """
    Return the visible text of a page, one cleaned line per text block.

    Args:
        html: HTML content as string
        limit: Maximum number of characters returned

    Returns:
        Page text truncated to ``limit`` characters
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()

    root = soup.body or soup
    lines = [clean_text(line) for line in root.get_text("\n").splitlines()]
    text = "\n".join(line for line in lines if line)
    return text[:limit]
