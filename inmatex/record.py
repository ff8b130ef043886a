"""
Record assembly for Inmate Extract.
"""

from typing import Any, Dict, List, Optional, Tuple

from inmatex.fields import get_field
from inmatex.model import Charge, FieldMap, InmateSummary

# Booking field -> acceptable labels, most specific first
FIELD_SYNONYMS: List[Tuple[str, Tuple[str, ...]]] = [
    ("agencyId", ("agency id", "agency")),
    ("arrestDate", ("arrest date/time", "arrest date")),
    ("bookingStarted", ("booking started", "booking start")),
    ("bookingComplete", ("booking complete", "booking completed")),
    ("height", ("height",)),
    ("weight", ("weight",)),
    ("hair", ("hair", "hair color")),
    ("eyes", ("eyes", "eye color")),
    ("address", ("address",)),
    ("city", ("city",)),
    ("state", ("state",)),
    ("zip", ("zip", "zip code")),
    ("placeOfBirth", ("place of birth", "birth place")),
    ("locationOfArrest", ("location of arrest", "arrest location")),
    ("courtroom", ("courtroom", "court room")),
    ("attorney", ("attorney",)),
    ("bondStatus", ("bond status",)),
    ("releaseDate", ("release date",)),
    ("releasedTo", ("released to",)),
]

# Used only when no search results row is known; matched exactly
SUMMARY_SYNONYMS: List[Tuple[str, Tuple[str, ...]]] = [
    ("name", ("name", "inmate name")),
    ("dob", ("dob", "date of birth")),
    ("race", ("race",)),
    ("sex", ("sex", "gender")),
    ("location", ("location",)),
    ("soid", ("soid", "state offender id")),
    ("daysInCustody", ("days in custody",)),
]


def assemble_record(
    fields: FieldMap,
    charges: List[Charge],
    summary: Optional[InmateSummary] = None,
) -> Dict[str, Any]:
    """
    Merge a detail page's fields and charges with its search results row.

    Args:
        fields: FieldMap of the detail page
        charges: Charges of the detail page
        summary: Matching search results row, copied as is when given

    Returns:
        Inmate record; unmatched fields are empty strings
    """
    record: Dict[str, Any] = {}

    for key, candidates in SUMMARY_SYNONYMS:
        if summary is not None:
            record[key] = summary.get(key, "")
        else:
            # Short labels like "name" occur inside other labels
            record[key] = get_field(fields, *candidates, exact=True)

    for key, candidates in FIELD_SYNONYMS:
        record[key] = get_field(fields, *candidates)

    record["charges"] = [dict(charge) for charge in charges]
    return record
