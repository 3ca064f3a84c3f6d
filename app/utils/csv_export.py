# app/utils/csv_export.py
import json
from typing import Any, Dict, List


def format_csv_value(value: Any) -> str:
    # Nested objects are written as JSON; every value loses its commas
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str).replace(",", ";")
    if value is None:
        return ""
    return str(value).replace(",", ";")


def rows_to_csv(rows: List[Dict[str, Any]]) -> str:
    """
    Header line from the first row's keys, then one line per row.
    Not RFC 4180: values are never quoted.
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(format_csv_value(row.get(header)) for header in headers))
    return "\n".join(lines)
