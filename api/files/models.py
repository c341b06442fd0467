"""
Models for the Files API

A FileRecord is one ingested FTP file as it is stored in the search index:

    {
      "id": "5d0f...",
      "source": "ftp1",
      "type": "FILE",
      "server": "host.example",
      "text": "hello",
      "modificationDate": "2024-01-15"
    }
"""

import json
import uuid
from datetime import date
from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field


class ModelType(str, Enum):
    """Known values of the record type tag."""
    FILE = "FILE"


def _new_id() -> str:
    return str(uuid.uuid4())


class FileRecord(BaseModel):
    """
    Metadata and extracted text of one ingested file.

    The id is generated when not supplied, and the type tag is always FILE
    for records built here. Values are not validated on assignment, so any
    field may be reassigned (or left empty) freely.
    """
    id: str | None = Field(default_factory=_new_id)
    source: str | None = None
    # Kept as a plain string so documents written with other tags still load
    type: str | None = ModelType.FILE.value
    server: str | None = None
    text: str | None = None
    modification_date: date | None = Field(default=None, alias="modificationDate")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    def to_json(self) -> str:
        """Serialize to the stored document layout"""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str | bytes) -> "FileRecord":
        """Parse a stored document"""
        return cls.model_validate_json(data)


class FileRecordUpdate(BaseModel):
    """
    Partial document for updates. Only the fields that are explicitly set
    are sent to the index.
    """
    source: str | None = None
    type: str | None = None
    server: str | None = None
    text: str | None = None
    modification_date: date | None = Field(default=None, alias="modificationDate")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class OperationStatus(str, Enum):
    """Outcome of a single document operation."""
    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"


class OperationResult(BaseModel):
    """
    Result of insert / get / delete / update on one (index, id) address
    """
    operation: str
    status: OperationStatus
    index: str
    id: str
    document: dict[str, Any] | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    def source_as_string(self) -> str | None:
        """Stored document as compact JSON, or None when there is none"""
        if self.document is None:
            return None
        return json.dumps(self.document, separators=(",", ":"), ensure_ascii=False)

    def to_record(self) -> FileRecord | None:
        if self.document is None:
            return None
        # Documents stored without an id take the id they are stored under
        return FileRecord.model_validate({"id": self.id, **self.document})
