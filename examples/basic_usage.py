"""
Basic usage example for Inmate Extract.

Extracts an inmate record from a saved detail page, then runs a live search.
"""

import os
import sys
from pathlib import Path

# Add the parent directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inmatex import Config, extract_booking_html, scrape
from inmatex.writers import write_csv, write_json


def print_inmate(i, inmate):
    print(f"\nInmate {i}:")
    print(f"  Name: {inmate['name']}")
    print(f"  SOID: {inmate['soid']}")
    print(f"  Arrest Date: {inmate['arrestDate']}")
    print(f"  Bond Status: {inmate['bondStatus']}")
    print(f"  Charges ({len(inmate['charges'])}):")

    for j, charge in enumerate(inmate["charges"], 1):
        print(f"    {j}. {charge.get('warrant', '')}: {charge.get('description', '')}")


def main():
    """
    Basic usage example.
    """
    os.makedirs("./out", exist_ok=True)

    cfg = Config()
    cfg.browser.backend = "requests"

    # Offline: a detail page saved from the browser
    detail_path = "./pages/detail.html"
    try:
        print(f"Processing {detail_path}...")
        record = extract_booking_html(Path(detail_path).read_text(encoding="utf-8"), None, cfg)
        print_inmate(1, record)
    except FileNotFoundError:
        print(f"Error: File not found: {detail_path}")
        print("Save a 'Last Known Booking' page to the ./pages directory")

    # Live search
    result = scrape("DOE JOHN", cfg)
    if result.error:
        print(f"Error: {result.error}")
        return

    print(f"\nFound {len(result.inmates)} inmates for {result.query}")
    for i, inmate in enumerate(result.inmates, 1):
        print_inmate(i, inmate)

    write_json(result.inmates, "./out/inmates.json", pretty=True)
    print("Wrote JSON to ./out/inmates.json")

    write_csv(result.inmates, "./out/inmates.csv")
    print("Wrote CSV to ./out/inmates.csv")


if __name__ == "__main__":
    main()
