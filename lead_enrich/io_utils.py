"""
I/O utilities: spreadsheet rows -> BusinessRecords -> enriched CSV
"""
import io
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from .logging_utils import setup_logger
from .models import RESULT_COLUMNS, BusinessRecord, RowStatus, is_blank

logger = setup_logger(__name__)

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xls")

# Shown/exported right after status, in this order, when present
LEADING_COLUMNS = ["name", "Name", "business_name", "Business Name", "website", "Website"]
ENRICHMENT_COLUMNS = list(RESULT_COLUMNS.keys())


class IngestError(ValueError):
    """Input file could not be turned into business rows (message is user-facing)."""


def _read_frame(source: Union[str, Path, io.BytesIO], filename: str) -> pd.DataFrame:
    name = filename.lower()
    if name.endswith(CSV_EXTENSIONS):
        try:
            return pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
        except pd.errors.EmptyDataError:
            raise IngestError("No valid data found in the file. Please check the file content and format.")
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise IngestError(f"Error in CSV file: {e}")
    if name.endswith(EXCEL_EXTENSIONS):
        try:
            # sheet_name=0: first sheet only
            return pd.read_excel(source, sheet_name=0, dtype=str).fillna("")
        except Exception as e:
            raise IngestError(f"Failed to parse file. Please ensure it's a valid CSV or XLSX. Error: {e}")
    raise IngestError("Unsupported file type. Please upload a CSV or XLSX file.")


def frame_to_records(df: pd.DataFrame) -> List[BusinessRecord]:
    """
    One Pending BusinessRecord per row; id is the row index in the file.
    Rows with no non-empty value are dropped after ids are assigned.
    """
    records = []
    for idx, row in enumerate(df.to_dict(orient="records")):
        fields = {str(k): ("" if is_blank(v) else v) for k, v in row.items()}
        if all(is_blank(v) for v in fields.values()):
            continue
        records.append(BusinessRecord(id=idx, fields=fields, status=RowStatus.PENDING))
    return records


def parse_records(content: bytes, filename: str) -> List[BusinessRecord]:
    """
    Parse an uploaded CSV/XLSX payload

    Args:
        content: Raw file bytes
        filename: Original file name (extension picks the parser)

    Returns:
        Non-empty list of BusinessRecords

    Raises:
        IngestError: unsupported type, unreadable file or no usable rows
    """
    if not content:
        raise IngestError("Could not read file content.")
    df = _read_frame(io.BytesIO(content), filename)
    return _records_or_fail(df, filename)


def load_records(filepath: Union[str, Path]) -> List[BusinessRecord]:
    """Load business rows from a CSV/XLSX file on disk."""
    filepath = Path(filepath)
    logger.info(f"Loading input file from: {filepath}")
    df = _read_frame(filepath, filepath.name)
    return _records_or_fail(df, filepath.name)


def _records_or_fail(df: pd.DataFrame, filename: str) -> List[BusinessRecord]:
    records = frame_to_records(df)
    logger.info(f"Loaded {len(records)} rows from {filename} (columns: {list(df.columns)})")
    if not records:
        raise IngestError("No valid data found in the file. Please check the file content and format.")
    return records


def input_columns(records: List[BusinessRecord]) -> List[str]:
    seen: Dict[str, None] = {}
    for r in records:
        for k in r.fields:
            seen.setdefault(k, None)
    return list(seen)


def export_columns(records: List[BusinessRecord]) -> List[str]:
    """
    Column order for export: name/website first, other input columns in
    first-seen order, enrichment columns last.
    """
    cols = [c for c in input_columns(records) if c not in ("id", "status")]
    leading = [c for c in LEADING_COLUMNS if c in cols]
    others = [c for c in cols if c not in leading and c not in ENRICHMENT_COLUMNS]
    return leading + others + ENRICHMENT_COLUMNS


def display_headers(records: List[BusinessRecord]) -> List[str]:
    """Results table headers: status column, then the export columns."""
    return ["status"] + export_columns(records)


def records_to_frame(records: List[BusinessRecord]) -> pd.DataFrame:
    cols = export_columns(records)
    df = pd.DataFrame([r.to_row() for r in records], columns=cols)
    return df.fillna("")


def write_output_csv(records: List[BusinessRecord], output_path: Union[str, Path]) -> None:
    """Write enriched rows to CSV (no id/status columns)."""
    df = records_to_frame(records)
    found = sum(1 for r in records if r.status == RowStatus.FOUND)
    logger.info(f"Export sanity: rows={len(df)} found={found} columns={len(df.columns)}")
    logger.info(f"Writing output CSV to: {output_path}")
    df.to_csv(output_path, index=False, encoding="utf-8", na_rep="")
    logger.info(f"Successfully wrote {len(df)} rows to {output_path}")
