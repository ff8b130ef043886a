"""
Charge segmentation for Inmate Extract.

The charges block of a detail page is a run of rows between a ``Charges``
marker and the ``Release Information`` block. Each charge opens with a
``Warrant`` row and is filled in by the rows after it:

    Warrant | 24-WD-001 | Warrant Date | 1/1/2026 | 1
    Case | 24CR001
    Offense Date | Code Section | Description | Type | Bond     (column headers)
    N/A | OCGA-1 | Theft | Felony | $0.00                      (values)
    Disposition | ...
    Bond Amount | $0.00
    Bond Status | Not Set
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from inmatex.classify import CHARGES, RELEASE, section_marker
from inmatex.config import ParsingConfig
from inmatex.log import get_logger
from inmatex.model import Charge, ChargeState, Row

logger = get_logger(__name__)

DOLLAR_AMOUNT = re.compile(r"^\$\s*[\d,]+(\.\d+)?$")

BOND_LABELS = {"bond status", "bond amount"}

# (state, marker) -> next state. Leaving IN_CHARGES finalizes the open charge.
TRANSITIONS: Dict[Tuple[ChargeState, str], ChargeState] = {
    (ChargeState.OUTSIDE, CHARGES): ChargeState.IN_CHARGES,
    (ChargeState.IN_CHARGES, RELEASE): ChargeState.IN_RELEASE,
}

# Column header -> Charge key, for the row under the column header row
COLUMN_FIELDS = [
    ("offense date", "offenseDate"),
    ("code section", "statute"),
    ("description", "description"),
    ("type", "type"),
    ("count", "counts"),
    ("bond", "bond"),
]


def is_dollar_amount(text: str) -> bool:
    return bool(DOLLAR_AMOUNT.match(text.strip()))


def is_warrant_row(row: Row) -> bool:
    """
    Check if a row opens a new charge.

    Args:
        row: Row to check

    Returns:
        True if the first cell is "Warrant" followed by a warrant number
    """
    second = row.cell(1)
    return row.cell(0).lower() == "warrant" and bool(second) and second.lower() != "date"


def is_column_header_row(row: Row) -> bool:
    text = row.text
    return "offense date" in text and "description" in text


def _column_index(headers: List[str], name: str) -> Optional[int]:
    # "count" matches "counts", "# count", ...
    if name == "count":
        for i, header in enumerate(headers):
            if "count" in header:
                return i
        return None
    if name in headers:
        return headers.index(name)
    return None


def map_columns(charge: Charge, headers: List[str], row: Row) -> None:
    """
    Copy a charge's values row into the charge by column header.

    Args:
        charge: Charge being built
        headers: Lower-cased column headers
        row: Values row under the headers
    """
    for header, key in COLUMN_FIELDS:
        index = _column_index(headers, header)
        if index is None:
            continue
        value = row.cell(index)
        if value:
            charge[key] = value


def start_charge(row: Row) -> Charge:
    charge: Charge = {"warrant": row.cell(1)}
    if row.cell(3):
        charge["warrantDate"] = row.cell(3)
    if row.cell(4):
        charge["counts"] = row.cell(4)
    return charge


def _bond_status(charge: Charge, row: Row) -> None:
    for cell in row.cells:
        if cell and cell.lower() not in BOND_LABELS and not is_dollar_amount(cell):
            charge["bondStatus"] = cell
            break

    if "bondAmount" not in charge:
        amounts = [cell for cell in row.cells if is_dollar_amount(cell)]
        amount = amounts[0] if amounts else row.cells[-1]
        if amount:
            charge["bondAmount"] = amount


class ChargeSegmenter:
    """
    Left-to-right scanner grouping the rows of the charges block into charges.
    """

    def __init__(self, cfg: Optional[ParsingConfig] = None):
        self.cfg = cfg or ParsingConfig()
        self.state = ChargeState.OUTSIDE
        self.charges: List[Charge] = []
        self.current: Optional[Charge] = None
        self.column_headers: Optional[List[str]] = None

    def finalize(self) -> None:
        """Append the open charge, if any, to the output."""
        if self.current is not None:
            self.charges.append(self.current)
            self.current = None
        self.column_headers = None

    def transition(self, marker: str) -> bool:
        """
        Apply a section marker.

        Returns:
            True if the marker changed state
        """
        next_state = TRANSITIONS.get((self.state, marker))
        if next_state is None:
            return False

        if self.state is ChargeState.IN_CHARGES:
            self.finalize()
        logger.debug(f"Charge segmenter: {self.state.value} -> {next_state.value}")
        self.state = next_state
        return True

    def feed(self, row: Row) -> None:
        """
        Consume one row.

        Args:
            row: Next row of the page
        """
        marker = section_marker(row, self.cfg)
        if marker and self.transition(marker):
            return

        if self.state is not ChargeState.IN_CHARGES:
            return

        if not any(row.cells):
            return

        headers, self.column_headers = self.column_headers, None
        first = row.cell(0).lower()
        text = row.text
        current = self.current

        if is_warrant_row(row):
            self.finalize()
            self.current = start_charge(row)
        elif first == "case" and current is not None:
            if row.cell(1):
                current["caseNumber"] = row.cell(1)
        elif is_column_header_row(row):
            self.column_headers = [cell.lower() for cell in row.cells]
        elif headers is not None and len(row.cells) >= 3 and current is not None:
            map_columns(current, headers, row)
        elif first == "disposition" and current is not None:
            disposition = " ".join(cell for cell in row.cells[1:] if cell)
            if disposition:
                current["disposition"] = disposition
        elif "bond status" in text and current is not None:
            _bond_status(current, row)
        elif "bond amount" in text and current is not None:
            if row.cells[-1]:
                current["bondAmount"] = row.cells[-1]
        else:
            logger.debug(f"Charge row ignored: {row.cells}")

    def close(self) -> List[Charge]:
        """Finalize the open charge and return all charges."""
        self.finalize()
        return self.charges


def segment_charges(rows: Iterable[Row], cfg: Optional[ParsingConfig] = None) -> List[Charge]:
    """
    Group the charges section of a detail page into charges.

    Args:
        rows: Rows in page order
        cfg: Parsing configuration

    Returns:
        Charges in page order; empty when the page has no warrant rows
    """
    segmenter = ChargeSegmenter(cfg)
    for row in rows:
        segmenter.feed(row)
    return segmenter.close()
