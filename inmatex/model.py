"""
Data models for Inmate Extract.
"""

from enum import Enum
from typing import Dict, List, NamedTuple, Sequence, Tuple, TypedDict


class Row(NamedTuple):
    """
    One table row from a rendered page.

    ``header_flags[i]`` is true when cell ``i`` came from ``<th>`` markup.
    """

    cells: Tuple[str, ...]
    header_flags: Tuple[bool, ...] = ()

    @classmethod
    def of(cls, cells: Sequence[str], header: bool = False) -> "Row":
        """Build a row whose cells all share the same header flag."""
        return cls(tuple(cells), tuple(header for _ in cells))

    @property
    def is_header(self) -> bool:
        return bool(self.cells) and len(self.header_flags) == len(self.cells) and all(self.header_flags)

    @property
    def header_count(self) -> int:
        return sum(1 for flag in self.header_flags if flag)

    @property
    def text(self) -> str:
        """Cells joined with single spaces, lower-cased."""
        return " ".join(cell for cell in self.cells if cell).lower()

    def cell(self, index: int) -> str:
        """Return the cell at ``index``, or an empty string when absent."""
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return ""


FieldMap = Dict[str, str]


class Charge(TypedDict, total=False):
    """
    Represents one charge from the charges section of a detail page.
    """

    warrant: str
    warrantDate: str
    counts: str
    caseNumber: str
    offenseDate: str
    statute: str  # "Code Section" column
    description: str
    type: str  # Felony / Misdemeanor
    bond: str
    bondAmount: str
    bondStatus: str
    disposition: str


class InmateSummary(TypedDict):
    """
    Represents one matching row of the search results list.
    """

    name: str
    dob: str
    race: str
    sex: str
    location: str
    soid: str  # State offender ID, nine digits
    daysInCustody: str


class BookingRecord(TypedDict, total=False):
    """
    Represents the booking data extracted from one inmate's detail page.
    """

    agencyId: str
    arrestDate: str
    bookingStarted: str
    bookingComplete: str
    height: str
    weight: str
    hair: str
    eyes: str
    address: str
    city: str
    state: str
    zip: str
    placeOfBirth: str
    locationOfArrest: str
    courtroom: str
    attorney: str
    bondStatus: str
    releaseDate: str
    releasedTo: str
    charges: List[Charge]


class RowKind(Enum):
    """
    Row classifications used by the extraction pipeline.
    """

    HEADER = "header"
    VALUE = "value"
    INLINE = "inline"
    SECTION_MARKER = "section_marker"


class ChargeState(Enum):
    """
    States for the charge segmenter state machine.
    """

    OUTSIDE = "outside"
    IN_CHARGES = "in_charges"
    IN_RELEASE = "in_release"


class InmateXError(Exception):
    """Base class for all inmatex exceptions."""

    pass


class ConfigError(InmateXError):
    """Exception raised for configuration errors."""

    pass


class InputError(InmateXError):
    """Exception raised for invalid caller input."""

    pass


class FetchError(InmateXError):
    """Exception raised when the search site cannot be reached or navigated."""

    pass
