"""
Pytest configuration and fixtures.
"""

import os
import tempfile
from typing import List

import pytest

from inmatex.config import Config
from inmatex.model import InmateSummary, Row


DETAIL_HTML = """
<html>
<head><title>Inmate Details</title><script>var x = 1;</script></head>
<body>
<table>
  <tr><td>
    <table>
      <tr><th>Name</th><th>DOB</th><th>Race</th><th>Sex</th><th>SOID</th></tr>
      <tr><td>DOE JOHN</td><td>01/02/1990</td><td>W</td><td>M</td><td>001234567</td></tr>
    </table>
  </td></tr>
</table>
<table>
  <tr><th>Height</th><td>5'10</td><th>Weight</th><td>180</td></tr>
  <tr><th>Hair</th><td>BRO</td><th>Eyes</th><td>BLU</td></tr>
  <tr><td>Address:</td><td>123   MAIN ST</td></tr>
  <tr><td>City</td><td>MARIETTA</td><td>State</td><td>GA</td></tr>
  <tr><td>Zip</td><td>30060</td></tr>
  <tr><td>Place of Birth</td><td>GEORGIA</td></tr>
</table>
<table>
  <tr><th>Arrest Agency Number</th><th>Arrest Date/Time</th><th>Booking Started</th><th>Booking Complete</th></tr>
  <tr><td>GA0330000</td><td>01/02/2024 09:15</td><td>01/02/2024 10:00</td><td>01/02/2024 14:30</td></tr>
  <tr><td>Location of Arrest</td><td>1 COURT ST</td></tr>
</table>
<table>
  <tr><td>Charges</td></tr>
  <tr><td>Warrant</td><td>24-WD-001</td><td>Warrant Date</td><td>01/01/2024</td><td>1</td></tr>
  <tr><td>Case</td><td>24CR001</td></tr>
  <tr><th>Offense Date</th><th>Code Section</th><th>Description</th><th>Type</th><th>Counts</th><th>Bond</th></tr>
  <tr><td>12/31/2023</td><td>16-8-2</td><td>THEFT BY TAKING</td><td>Felony</td><td>1</td><td>$0.00</td></tr>
  <tr><td>Disposition</td><td>PENDING</td><td>TRIAL</td></tr>
  <tr><td>Bond Amount</td><td>$5,000.00</td></tr>
  <tr><td>Bond Status</td><td>Not Set</td></tr>
  <tr><td>Warrant</td><td>24-WD-002</td><td>Warrant Date</td><td>01/01/2024</td><td>2</td></tr>
  <tr><td>Case</td><td>24CR002</td></tr>
  <tr><th>Offense Date</th><th>Code Section</th><th>Description</th><th>Type</th><th>Counts</th><th>Bond</th></tr>
  <tr><td>12/31/2023</td><td>40-6-391</td><td>DUI</td><td>Misdemeanor</td><td>2</td><td>$1,000.00</td></tr>
  <tr><td>Release Information</td></tr>
  <tr><th>Release Date</th><th>Released To</th></tr>
  <tr><td>Not Released</td><td></td></tr>
</table>
</body>
</html>
"""

RESULTS_HTML = """
<html>
<body>
<table>
  <tr><th></th><th>Name</th><th>DOB</th><th>Race</th><th>Sex</th><th>Location</th><th>SOID</th><th>Days in Custody</th></tr>
  <tr>
    <td><form action="InmDetails.asp" method="post">
      <input type="hidden" name="soid" value="001234567">
      <input type="hidden" name="BOOKING_ID" value="111">
      <input type="submit" name="submit" value="Last Known Booking">
    </form></td>
    <td>DOE JOHN</td><td>01/02/1990</td><td>W</td><td>M</td><td>ADC 3 EAST</td><td>001234567</td><td>12</td>
  </tr>
  <tr>
    <td><form action="InmDetails.asp" method="post">
      <input type="hidden" name="soid" value="007654321">
      <input type="hidden" name="BOOKING_ID" value="222">
      <input type="submit" name="submit" value="Last Known Booking">
    </form></td>
    <td>DOE JANE</td><td>03/04/1985</td><td>W</td><td>F</td><td>RELEASED</td><td>007654321</td><td>0</td>
  </tr>
  <tr><td colspan="8">2 records found</td></tr>
</table>
</body>
</html>
"""

NO_RESULTS_HTML = """
<html>
<body>
<table>
  <tr><th></th><th>Name</th><th>DOB</th><th>Race</th><th>Sex</th><th>Location</th><th>SOID</th><th>Days in Custody</th></tr>
  <tr><td colspan="8">No records found</td></tr>
</table>
</body>
</html>
"""


@pytest.fixture
def sample_config():
    """Return a sample configuration."""
    return Config()


@pytest.fixture
def detail_html() -> str:
    """Return a rendered detail page."""
    return DETAIL_HTML


@pytest.fixture
def results_html() -> str:
    """Return a rendered search results page with two matches."""
    return RESULTS_HTML


@pytest.fixture
def no_results_html() -> str:
    """Return a rendered search results page with no matches."""
    return NO_RESULTS_HTML


@pytest.fixture
def sample_summary() -> InmateSummary:
    """Return a sample search results row."""
    return {
        "name": "DOE JOHN",
        "dob": "01/02/1990",
        "race": "W",
        "sex": "M",
        "location": "ADC 3 EAST",
        "soid": "001234567",
        "daysInCustody": "12",
    }


@pytest.fixture
def charge_rows() -> List[Row]:
    """Return the rows of a charges section holding one charge."""
    return [
        Row.of(["Charges"]),
        Row.of(["Warrant", "24-WD-001", "Warrant Date", "1/1/2026", "1"]),
        Row.of(["Case", "24CR001"]),
        Row.of(["Offense Date", "Code Section", "Description", "Type", "Bond"], header=True),
        Row.of(["N/A", "OCGA-1", "Theft", "Felony", "$0.00"]),
    ]


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield tmp_dir


@pytest.fixture
def temp_file():
    """Create a temporary file."""
    with tempfile.NamedTemporaryFile(delete=False) as tmp:
        tmp_path = tmp.name

    yield tmp_path

    if os.path.exists(tmp_path):
        os.unlink(tmp_path)
