"""
Inmate Extract - County Inmate Search Extraction Service.

A service for searching a county inmate site and extracting structured booking
records from its legacy HTML table layout.
"""

__version__ = "0.1.0"

from inmatex.model import Row, Charge, InmateSummary, BookingRecord, RowKind, ChargeState
from inmatex.config import Config, load_config
from inmatex.rows import extract_rows
from inmatex.classify import classify_row, section_marker
from inmatex.fields import normalize_label, reconstruct_fields, get_field
from inmatex.charges import segment_charges
from inmatex.record import assemble_record
from inmatex.results import parse_search_results
from inmatex.pipeline import extract_booking, extract_booking_html
from inmatex.api import scrape, ScrapeResult

__all__ = [
    "Row",
    "Charge",
    "InmateSummary",
    "BookingRecord",
    "RowKind",
    "ChargeState",
    "Config",
    "load_config",
    "extract_rows",
    "classify_row",
    "section_marker",
    "normalize_label",
    "reconstruct_fields",
    "get_field",
    "segment_charges",
    "assemble_record",
    "parse_search_results",
    "extract_booking",
    "extract_booking_html",
    "scrape",
    "ScrapeResult",
]
