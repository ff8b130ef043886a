"""
Output writers for Inmate Extract.
"""

import csv
import json
import os
from typing import Any, Dict, List

from inmatex.log import get_logger
from inmatex.model import Charge, InmateXError

logger = get_logger(__name__)

CHARGE_COLUMNS = list(Charge.__annotations__)


def write_output(records: List[Dict[str, Any]], path: str, pretty: bool = True) -> None:
    """
    Write records to a file, choosing the format from the extension.

    Args:
        records: Inmate records
        path: Output file path (.json or .csv)
        pretty: Whether to pretty-print JSON
    """
    if path.lower().endswith(".csv"):
        write_csv(records, path)
    elif path.lower().endswith(".json"):
        write_json(records, path, pretty)
    else:
        raise InmateXError(f"Unsupported output format: {path}")


def write_json(records: List[Dict[str, Any]], path: str, pretty: bool = True) -> None:
    """
    Write records to a JSON file.

    Args:
        records: Inmate records
        path: Output file path
        pretty: Whether to pretty-print the JSON
    """
    logger.info(f"Writing JSON to {path}")

    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            if pretty:
                json.dump(records, f, indent=2, ensure_ascii=False)
            else:
                json.dump(records, f, ensure_ascii=False)

        logger.info(f"Wrote {len(records)} records to {path}")
    except OSError as e:
        logger.error(f"Error writing JSON to {path}: {e}")
        raise InmateXError(f"Error writing JSON to {path}: {e}")


def flatten_records(records: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten records to one row per charge, inmate columns repeated.

    Inmates without charges get a single row with empty charge columns.

    Args:
        records: Inmate records

    Returns:
        Flat rows
    """
    rows = []
    for record in records:
        base = {key: value for key, value in record.items() if key not in ("charges", "details")}
        charges = record.get("charges") or [{}]
        for charge in charges:
            row = dict(base)
            for column in CHARGE_COLUMNS:
                row[f"charge_{column}"] = charge.get(column, "")
            rows.append(row)
    return rows


def write_csv(records: List[Dict[str, Any]], path: str) -> None:
    """
    Write records to a CSV file, one row per charge.

    Args:
        records: Inmate records
        path: Output file path
    """
    logger.info(f"Writing CSV to {path}")
    rows = flatten_records(records)

    fieldnames: List[str] = []
    for row in rows:
        for key in row:
            if key not in fieldnames:
                fieldnames.append(key)

    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, restval="")
            writer.writeheader()
            writer.writerows(rows)

        logger.info(f"Wrote {len(rows)} rows to {path}")
    except OSError as e:
        logger.error(f"Error writing CSV to {path}: {e}")
        raise InmateXError(f"Error writing CSV to {path}: {e}")
