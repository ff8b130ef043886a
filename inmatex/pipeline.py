"""
Extraction pipeline for Inmate Extract.

rows -> classify -> (reconstruct fields, segment charges) -> assemble
"""

import json
from typing import Any, Dict, Optional, Sequence

from inmatex.charges import segment_charges
from inmatex.classify import classify_row
from inmatex.config import Config
from inmatex.fields import reconstruct_fields
from inmatex.log import get_logger
from inmatex.model import InmateSummary, Row
from inmatex.record import assemble_record
from inmatex.rows import extract_rows, page_text

logger = get_logger(__name__)


def extract_booking(
    rows: Sequence[Row],
    summary: Optional[InmateSummary] = None,
    cfg: Optional[Config] = None,
) -> Dict[str, Any]:
    """
    Extract an inmate record from the rows of one detail page.

    Args:
        rows: Rows of the detail page
        summary: Matching search results row, if known
        cfg: Configuration

    Returns:
        Inmate record
    """
    cfg = cfg or Config()
    rows = list(rows)

    kinds = [classify_row(row, cfg.parsing) for row in rows]
    fields = reconstruct_fields(rows, cfg.parsing, kinds)
    charges = segment_charges(rows, cfg.parsing)

    logger.debug(f"Reconstructed {len(fields)} fields and {len(charges)} charges")
    return assemble_record(fields, charges, summary)


def extract_booking_html(
    html: str,
    summary: Optional[InmateSummary] = None,
    cfg: Optional[Config] = None,
) -> Dict[str, Any]:
    """
    Extract an inmate record from a detail page's HTML.

    Args:
        html: Rendered detail page
        summary: Matching search results row, if known
        cfg: Configuration

    Returns:
        Inmate record, with the page text under "details" when enabled
    """
    cfg = cfg or Config()
    record = extract_booking(extract_rows(html), summary, cfg)

    if cfg.output.include_raw_text:
        record["details"] = page_text(html, cfg.parsing.raw_text_limit)
    return record


def to_json(obj: Any, pretty: bool = True) -> str:
    """
    Serialize a record or result to JSON.

    Args:
        obj: Object to serialize
        pretty: Whether to pretty-print

    Returns:
        JSON text
    """
    if pretty:
        return json.dumps(obj, indent=2, ensure_ascii=False)
    return json.dumps(obj, ensure_ascii=False)
