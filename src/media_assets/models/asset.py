"""Result models produced by the media asset operations."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class ResponsiveImageUrls(BaseModel):
    """Public URLs of the four responsive variants of one uploaded image."""

    model_config = ConfigDict(frozen=True)

    thumb: StrictStr = Field(..., description="400px bounding-box rendition")
    medium: StrictStr = Field(..., description="800px bounding-box rendition")
    large: StrictStr = Field(..., description="1200px bounding-box rendition")
    original: StrictStr = Field(..., description="2000px bounding-box rendition")


class FileInfo(BaseModel):
    """Object metadata reported by the store for a single key."""

    model_config = ConfigDict(frozen=True)

    size_bytes: StrictInt = Field(..., ge=0, description="Stored object size in bytes")
    last_modified: datetime | None = Field(None, description="Last modification time (UTC)")
    content_type: StrictStr | None = Field(None, description="Stored Content-Type header")


class DeleteStatus(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class DeleteOutcome(BaseModel):
    """Result of a best-effort delete.

    Truthy unless the delete failed, so it can stand in for a plain
    success flag.
    """

    model_config = ConfigDict(frozen=True)

    status: DeleteStatus
    url: StrictStr | None = None
    key: StrictStr | None = None
    reason: StrictStr | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is not DeleteStatus.FAILED

    def __bool__(self) -> bool:
        return self.succeeded


class BatchDeleteReport(BaseModel):
    """Per-item outcomes of a sequential multi-URL delete."""

    outcomes: list[DeleteOutcome] = Field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def deleted(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    @property
    def failures(self) -> list[DeleteOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]


class VariantBatch(BaseModel):
    """Rendered variants plus per-variant failure reasons (partial mode)."""

    rendered: list[tuple[StrictStr, bytes]] = Field(default_factory=list, repr=False)
    failures: dict[StrictStr, StrictStr] = Field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.failures

    def as_dict(self) -> dict[str, bytes]:
        return dict(self.rendered)
