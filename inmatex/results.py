"""
Search results parsing for Inmate Extract.
"""

import re
from typing import Iterable, List, Optional

from inmatex.config import ResultsConfig
from inmatex.log import get_logger
from inmatex.model import InmateSummary, Row

logger = get_logger(__name__)


def parse_summary_row(row: Row, cfg: ResultsConfig) -> Optional[InmateSummary]:
    """
    Map one results row to an inmate summary.

    Args:
        row: Row from the results table
        cfg: Results table layout

    Returns:
        Inmate summary, or None if the row has no valid SOID
    """
    summary = {
        column: row.cell(cfg.first_column + offset)
        for offset, column in enumerate(cfg.columns)
    }

    if not re.match(cfg.soid_pattern, summary.get("soid", "")):
        return None

    for key in InmateSummary.__annotations__:
        summary.setdefault(key, "")
    return summary


def parse_search_results(
    rows: Iterable[Row], cfg: Optional[ResultsConfig] = None
) -> List[InmateSummary]:
    """
    Extract inmate summaries from the rows of a search results page.

    Args:
        rows: Rows of the results page
        cfg: Results table layout

    Returns:
        One summary per row carrying a valid SOID
    """
    cfg = cfg or ResultsConfig()
    summaries = []

    for row in rows:
        summary = parse_summary_row(row, cfg)
        if summary is None:
            continue
        summaries.append(summary)

    logger.info(f"Found {len(summaries)} matching inmates in search results")
    return summaries
