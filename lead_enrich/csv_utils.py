"""
CSV Utilities

In-memory CSV serialization for API downloads (no temp files).
"""
import io
import csv
from typing import List

from .io_utils import export_columns
from .models import BusinessRecord


def records_to_csv_bytes(records: List[BusinessRecord]) -> bytes:
    """
    Serialize enriched records to CSV bytes.

    Same column order as write_output_csv; id/status are left out.

    Args:
        records: Business rows

    Returns:
        CSV bytes (UTF-8 encoded)
    """
    output = io.StringIO()
    fieldnames = export_columns(records)

    writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
    writer.writeheader()
    for r in records or []:
        row = r.to_row()
        writer.writerow({k: ("" if row.get(k) is None else row.get(k)) for k in fieldnames})

    return output.getvalue().encode("utf-8")
