"""
Row and result types for the lead enrichment pipeline

A BusinessRecord carries the input row untouched in `fields` and the
enrichment outcome in `result`; the two are only merged when a row is
exported or returned by the API.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Optional

import pandas as pd

WEBSITE_FIELDS = ("website", "Website")

# Export column name -> EnrichmentResult attribute
RESULT_COLUMNS = {
    "ownerTitle": "owner_title",
    "ownerFirstName": "owner_first_name",
    "ownerLastName": "owner_last_name",
    "ownerEmail": "owner_email",
    "niche": "niche",
    "uncertainty": "uncertainty",
}


def is_blank(value: Any) -> bool:
    """None, NaN/NA or an all-whitespace string."""
    if value is None:
        return True
    try:
        if pd.isna(value):
            return True
    except (TypeError, ValueError):
        pass
    return str(value).strip() == ""


class RowStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    FOUND = "Found"
    NOT_FOUND = "Not Found"
    ERROR = "Error"


class ProcessingStatus(str, Enum):
    """Run-level status of a batch (job)."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class EnrichmentResult:
    owner_title: str = ""
    owner_first_name: str = ""
    owner_last_name: str = ""
    owner_email: str = ""
    niche: str = ""
    uncertainty: str = ""

    @classmethod
    def empty(cls, reason: str) -> "EnrichmentResult":
        """All fields empty, with the reason nothing could be extracted."""
        return cls(uncertainty=reason)

    def has_contact(self) -> bool:
        return bool(self.owner_first_name or self.owner_last_name or self.owner_email)

    def to_columns(self) -> Dict[str, str]:
        return {col: getattr(self, attr) for col, attr in RESULT_COLUMNS.items()}

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class BusinessRecord:
    id: int
    fields: Dict[str, Any] = field(default_factory=dict)
    status: RowStatus = RowStatus.PENDING
    result: Optional[EnrichmentResult] = None

    @property
    def website(self) -> Optional[Any]:
        for key in WEBSITE_FIELDS:
            value = self.fields.get(key)
            if not is_blank(value):
                return value
        return None

    def to_row(self) -> Dict[str, Any]:
        """
        Export shape: input columns followed by the enrichment columns.
        Internal id/status are not part of it.
        """
        row = {k: v for k, v in self.fields.items() if k not in ("id", "status")}
        if self.result is not None:
            row.update(self.result.to_columns())
        return row

    def to_dict(self) -> Dict[str, Any]:
        """API shape: export row plus id and status."""
        out = {"id": self.id, "status": self.status.value}
        out.update(self.to_row())
        return out
