"""
Row classifier for Inmate Extract.

Detail pages never label their tables, so each row is classified from its
markup and text alone:

* ``HEADER``: every cell is ``<th>``, none starts with a digit and none is
  longer than ``header_max_cell_length``. The cells are candidate labels
  for the next row.
* ``INLINE``: ``<th>`` and ``<td>`` cells in equal counts; cells pair up
  as label, value.
* ``SECTION_MARKER``: the row announces the charges block or the release
  information block.
* ``VALUE``: anything else.

Header markup is checked first. Section markers are also detected on their
own through :func:`section_marker`, whatever the row's class.
"""

import re
from typing import Optional

from inmatex.config import ParsingConfig
from inmatex.model import Row, RowKind

LEADING_DIGIT = re.compile(r"^\d")

CHARGES = "charges"
RELEASE = "release"


def looks_like_label(cell: str, max_length: int = 60) -> bool:
    """Check if a cell's text could be a field label."""
    return not LEADING_DIGIT.match(cell) and len(cell) <= max_length


def section_marker(row: Row, cfg: Optional[ParsingConfig] = None) -> Optional[str]:
    """
    Return the section a row announces, if any.

    Args:
        row: Row to check
        cfg: Parsing configuration

    Returns:
        ``"charges"``, ``"release"`` or None
    """
    cfg = cfg or ParsingConfig()
    text = row.text
    if not text:
        return None

    if text == cfg.charges_marker.lower():
        return CHARGES
    if any(marker.lower() in text for marker in cfg.release_markers):
        return RELEASE
    return None


def classify_row(row: Row, cfg: Optional[ParsingConfig] = None) -> RowKind:
    """
    Classify one row.

    Args:
        row: Row to classify
        cfg: Parsing configuration

    Returns:
        Row kind
    """
    cfg = cfg or ParsingConfig()

    if row.is_header and all(
        looks_like_label(cell, cfg.header_max_cell_length) for cell in row.cells
    ):
        return RowKind.HEADER

    headers = row.header_count
    if headers and len(row.cells) == 2 * headers:
        return RowKind.INLINE

    if section_marker(row, cfg):
        return RowKind.SECTION_MARKER

    return RowKind.VALUE
