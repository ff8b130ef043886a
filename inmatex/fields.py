"""
Key-value reconstruction for Inmate Extract.

Detail pages lay their fields out in three shapes: a header row of labels
followed by a row of values, a two-cell ``label | value`` row, and a
four-cell row holding two such pairs side by side. The reconstructor folds
over the rows with one piece of state, the labels of the last header row,
and writes every recovered pair into a FieldMap.
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from inmatex.classify import classify_row
from inmatex.config import ParsingConfig
from inmatex.log import get_logger
from inmatex.model import FieldMap, Row, RowKind

logger = get_logger(__name__)

Pair = Tuple[str, str]

TRAILING_COLONS = re.compile(r"[\s:]+$")
WHITESPACE = re.compile(r"\s+")


def normalize_label(label: str) -> str:
    """
    Normalize a field label: lower-case, trailing colons dropped, trimmed.

    Args:
        label: Raw label text

    Returns:
        Normalized label
    """
    label = WHITESPACE.sub(" ", label or "").lower()
    return TRAILING_COLONS.sub("", label).strip()


def _pair(label: str, value: str) -> Optional[Pair]:
    label = normalize_label(label)
    if not label or not value:
        return None
    return label, value


def pair_row(
    row: Row, kind: RowKind, pending: Tuple[str, ...]
) -> Tuple[List[Pair], Tuple[str, ...]]:
    """
    Recover label/value pairs from one row.

    Args:
        row: Current row
        kind: Classification of the row
        pending: Normalized labels from the previous header row

    Returns:
        Tuple of (pairs to write, pending labels for the next row)
    """
    cells = row.cells

    if kind is RowKind.HEADER:
        return [], tuple(normalize_label(cell) for cell in cells)

    if pending and cells:
        pairs = [_pair(label, value) for label, value in zip(pending, cells)]
        return [p for p in pairs if p], ()

    if kind is RowKind.INLINE:
        pairs = [_pair(cells[i], cells[i + 1]) for i in range(0, len(cells) - 1, 2)]
        return [p for p in pairs if p], ()

    if len(cells) == 2 and cells[0] and cells[1]:
        pair = _pair(cells[0], cells[1])
        return ([pair] if pair else []), ()

    if len(cells) >= 4:
        pairs = [_pair(cells[0], cells[1]), _pair(cells[2], cells[3])]
        return [p for p in pairs if p], ()

    if cells:
        logger.debug(f"No pairing rule for row: {cells}")
    return [], pending


def reconstruct_fields(
    rows: Iterable[Row],
    cfg: Optional[ParsingConfig] = None,
    kinds: Optional[Sequence[RowKind]] = None,
) -> FieldMap:
    """
    Build a FieldMap from the rows of a detail page.

    Args:
        rows: Rows in page order
        cfg: Parsing configuration
        kinds: Precomputed classifications, one per row

    Returns:
        Mapping of normalized label to value; later pairs overwrite earlier ones
    """
    rows = list(rows)
    if kinds is None:
        kinds = [classify_row(row, cfg) for row in rows]

    fields: FieldMap = {}
    pending: Tuple[str, ...] = ()

    for row, kind in zip(rows, kinds):
        pairs, pending = pair_row(row, kind, pending)
        for label, value in pairs:
            fields[label] = value

    return fields


def get_field(fields: FieldMap, *candidates: str, exact: bool = False) -> str:
    """
    Look up a field by candidate labels.

    Every candidate is tried as an exact key first. Failing that, each
    candidate in order is matched as a substring of the keys, in insertion
    order, and the first hit wins. Substring hits can be false positives
    when several labels share a word.

    Args:
        fields: FieldMap to search
        candidates: Acceptable labels, most specific first
        exact: Skip the substring fallback

    Returns:
        The matched value, or an empty string
    """
    keys = [normalize_label(c) for c in candidates if isinstance(c, str)]
    keys = [k for k in keys if k]

    for key in keys:
        if key in fields:
            return fields[key]

    if exact:
        return ""

    for key in keys:
        for label, value in fields.items():
            if key in label:
                return value

    return ""
