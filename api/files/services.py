"""
Services for storing file records in OpenSearch

Each operation addresses one document by (index, id), makes a single
synchronous call to the client and reports the outcome as an
OperationResult. Failures are logged and returned, never raised.
"""
import copy
import json
from abc import ABC, abstractmethod
from typing import Any

from opensearchpy import OpenSearch
from opensearchpy.exceptions import NotFoundError, OpenSearchException
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from core.logger import logger

from api.files.models import (
    OperationResult,
    OperationStatus,
)

# Returned by get_by_id_as_string for anything but a found document
DOCUMENT_NOT_FOUND = "Document was not found"

SERIALIZATION_ERRORS = (PydanticSerializationError, TypeError, ValueError)


def to_document(record: Any, partial: bool = False) -> dict:
    """
    Convert a record to the JSON document sent to the index.

    With partial=True only the fields that were explicitly set on a model
    are included.
    """
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json", by_alias=True, exclude_unset=partial)
    # Plain dicts and lists must survive a trip through json as well
    return json.loads(json.dumps(record))


def _result(
    operation: str,
    status: OperationStatus,
    index: str,
    id: str,
    document: dict | None = None,
    error: Exception | None = None,
) -> OperationResult:
    return OperationResult(
        operation=operation,
        status=status,
        index=index,
        id=id,
        document=document,
        detail=str(error) if error is not None else None,
    )


class FileDocumentOperations(ABC):
    """
    Insert, get, delete and update of documents addressed by (index, id).
    """

    @abstractmethod
    def insert(self, record: Any, index: str, id: str) -> OperationResult:
        """Store the record under (index, id), replacing any existing document."""

    @abstractmethod
    def get_by_id(self, index: str, id: str) -> OperationResult:
        """Fetch the document stored under (index, id)."""

    @abstractmethod
    def delete_by_id(self, index: str, id: str) -> OperationResult:
        """Remove the document stored under (index, id)."""

    @abstractmethod
    def update_by_id(self, record: Any, index: str, id: str) -> OperationResult:
        """Merge the set fields of the record into the stored document."""


class OpenSearchFileOperations(FileDocumentOperations):
    """FileDocumentOperations backed by an OpenSearch client"""

    def __init__(self, client: OpenSearch):
        self.client = client

    def insert(self, record: Any, index: str, id: str) -> OperationResult:
        try:
            document = to_document(record)
        except SERIALIZATION_ERRORS as e:
            logger.error("Could not serialize document %s/%s: %s", index, id, e)
            return _result("insert", OperationStatus.SERIALIZATION_ERROR, index, id, error=e)

        try:
            self.client.index(index=index, id=id, body=document)
        except OpenSearchException as e:
            logger.error("Failed to index document %s/%s: %s", index, id, e)
            return _result("insert", OperationStatus.TRANSPORT_ERROR, index, id, error=e)

        return _result("insert", OperationStatus.SUCCESS, index, id, document=document)

    def get_by_id(self, index: str, id: str) -> OperationResult:
        try:
            response = self.client.get(index=index, id=id)
        except NotFoundError:
            return _result("get", OperationStatus.NOT_FOUND, index, id)
        except OpenSearchException as e:
            logger.error("Failed to get document %s/%s: %s", index, id, e)
            return _result("get", OperationStatus.TRANSPORT_ERROR, index, id, error=e)

        if not response or not response.get("found"):
            return _result("get", OperationStatus.NOT_FOUND, index, id)

        return _result(
            "get", OperationStatus.SUCCESS, index, id, document=response.get("_source")
        )

    def delete_by_id(self, index: str, id: str) -> OperationResult:
        try:
            self.client.delete(index=index, id=id)
        except NotFoundError:
            return _result("delete", OperationStatus.NOT_FOUND, index, id)
        except OpenSearchException as e:
            logger.error("Failed to delete document %s/%s: %s", index, id, e)
            return _result("delete", OperationStatus.TRANSPORT_ERROR, index, id, error=e)

        return _result("delete", OperationStatus.SUCCESS, index, id)

    def update_by_id(self, record: Any, index: str, id: str) -> OperationResult:
        try:
            document = to_document(record, partial=True)
        except SERIALIZATION_ERRORS as e:
            logger.error("Could not serialize document %s/%s: %s", index, id, e)
            return _result("update", OperationStatus.SERIALIZATION_ERROR, index, id, error=e)

        try:
            # _source=true returns the merged document in the response
            response = self.client.update(
                index=index,
                id=id,
                body={"doc": document},
                params={"_source": "true"},
            )
        except NotFoundError:
            return _result("update", OperationStatus.NOT_FOUND, index, id)
        except OpenSearchException as e:
            logger.error("Failed to update document %s/%s: %s", index, id, e)
            return _result("update", OperationStatus.TRANSPORT_ERROR, index, id, error=e)

        updated = (response or {}).get("get", {}).get("_source")
        return _result("update", OperationStatus.SUCCESS, index, id, document=updated)


class InMemoryFileOperations(FileDocumentOperations):
    """
    FileDocumentOperations over a dict of {index: {id: document}}.
    Useful for tests and for running the API without a cluster.
    """

    def __init__(self):
        self.documents: dict[str, dict[str, dict]] = {}

    def insert(self, record: Any, index: str, id: str) -> OperationResult:
        try:
            document = to_document(record)
        except SERIALIZATION_ERRORS as e:
            logger.error("Could not serialize document %s/%s: %s", index, id, e)
            return _result("insert", OperationStatus.SERIALIZATION_ERROR, index, id, error=e)

        self.documents.setdefault(index, {})[id] = copy.deepcopy(document)
        return _result("insert", OperationStatus.SUCCESS, index, id, document=document)

    def get_by_id(self, index: str, id: str) -> OperationResult:
        document = self.documents.get(index, {}).get(id)
        if document is None:
            return _result("get", OperationStatus.NOT_FOUND, index, id)
        return _result("get", OperationStatus.SUCCESS, index, id, document=copy.deepcopy(document))

    def delete_by_id(self, index: str, id: str) -> OperationResult:
        if self.documents.get(index, {}).pop(id, None) is None:
            return _result("delete", OperationStatus.NOT_FOUND, index, id)
        return _result("delete", OperationStatus.SUCCESS, index, id)

    def update_by_id(self, record: Any, index: str, id: str) -> OperationResult:
        try:
            document = to_document(record, partial=True)
        except SERIALIZATION_ERRORS as e:
            logger.error("Could not serialize document %s/%s: %s", index, id, e)
            return _result("update", OperationStatus.SERIALIZATION_ERROR, index, id, error=e)

        stored = self.documents.get(index, {}).get(id)
        if stored is None:
            return _result("update", OperationStatus.NOT_FOUND, index, id)
        stored.update(document)
        return _result("update", OperationStatus.SUCCESS, index, id, document=copy.deepcopy(stored))


def get_by_id_as_string(
    operations: FileDocumentOperations, index: str, id: str
) -> str:
    """
    Get a document as a JSON string, or DOCUMENT_NOT_FOUND if it is missing
    or could not be fetched.
    """
    result = operations.get_by_id(index, id)
    if result.ok and result.document is not None:
        return result.source_as_string()
    return DOCUMENT_NOT_FOUND
