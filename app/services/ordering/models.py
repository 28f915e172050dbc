"""Order models."""
from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class OrderRequest(BaseModel):
    """Pickup order placed on behalf of a caller."""

    model_config = ConfigDict(frozen=True)

    order_items: str
    customer_name: str
    customer_phone: str
    special_instructions: str = ""
    pickup_time: str = "ASAP"  # Informational only, the site computes its own estimate


class ParsedLineItem(BaseModel):
    """Structured line item derived from the free-text order."""

    raw_text: str
    canonical_name: str
    quantity: int = Field(default=1, ge=1)
    modifications: List[str] = []


class SnapshotRecord(BaseModel):
    """Full-page screenshot taken at a pipeline checkpoint."""

    label: str
    image: str  # base64-encoded PNG
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class OrderResult(BaseModel):
    """Outcome of a single order placement."""

    success: bool = False
    confirmation_number: Optional[str] = None
    estimated_pickup_time: Optional[str] = None
    total_amount: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    failed_stage: Optional[str] = None
    error_page_html: Optional[str] = None
    diagnostics: List[SnapshotRecord] = []

    def add_snapshot(self, snapshot: SnapshotRecord) -> None:
        """Append a snapshot to the diagnostics trail."""
        self.diagnostics.append(snapshot)

    def mark_succeeded(self) -> None:
        """Finalize the result as a successful placement."""
        self.success = True
        self.error = None
        self.error_type = None

    def mark_failed(
        self, error: str, error_type: str, failed_stage: Optional[str] = None
    ) -> None:
        """Finalize the result as a failed placement."""
        self.success = False
        self.error = error
        self.error_type = error_type
        self.failed_stage = failed_stage

    def get_snapshot_labels(self) -> List[str]:
        """Get the labels of all captured snapshots, in capture order."""
        return [snapshot.label for snapshot in self.diagnostics]
