"""Upstream file descriptor accepted by the upload operations."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictInt, StrictStr, model_validator


class UploadFile(BaseModel):
    """In-memory uploaded file, as handed over by the HTTP layer.

    Mirrors the multipart descriptor shape `{mimetype, size, buffer}`.
    When `size` is omitted it defaults to the length of `buffer`.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    mimetype: StrictStr = Field(..., description="Declared MIME type (e.g. image/jpeg)")
    size: StrictInt = Field(..., ge=0, description="Declared size in bytes")
    buffer: StrictBytes = Field(..., repr=False, description="Raw file content")
    filename: StrictStr | None = Field(None, description="Original client-side file name")

    @model_validator(mode="before")
    @classmethod
    def default_size(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("size") is None and isinstance(data.get("buffer"), bytes):
            return {**data, "size": len(data["buffer"])}
        return data

    @classmethod
    def from_bytes(cls, buffer: bytes, mimetype: str, filename: str | None = None) -> "UploadFile":
        """Build a descriptor whose size is the buffer length."""
        return cls(mimetype=mimetype, size=len(buffer), buffer=buffer, filename=filename)
