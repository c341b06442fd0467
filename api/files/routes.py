"""
Routes/endpoints for the Files API

HTTP    URI                                  Action
----    ---                                  ------
POST    /api/v1/files/[index]                Index a file record under its own id
PUT     /api/v1/files/[index]/[id]           Index (replace) a file record at id
GET     /api/v1/files/[index]/[id]           Retrieve a file record
GET     /api/v1/files/[index]/[id]/raw       Retrieve the stored JSON as text
PATCH   /api/v1/files/[index]/[id]           Update some fields of a file record
DELETE  /api/v1/files/[index]/[id]           Delete a file record
"""

from fastapi import APIRouter, HTTPException, Response, status
from fastapi.responses import PlainTextResponse

from core.deps import FileOperationsDep
from api.files.models import (
    FileRecord,
    FileRecordUpdate,
    OperationResult,
    OperationStatus,
)
from api.files import services

router = APIRouter(prefix="/files", tags=["File Endpoints"])

ERROR_STATUS_CODES = {
    OperationStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OperationStatus.SERIALIZATION_ERROR: 422,
    OperationStatus.TRANSPORT_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def _check(result: OperationResult) -> OperationResult:
    """Raise an HTTPException for anything but a successful result"""
    if result.ok:
        return result
    if result.status == OperationStatus.NOT_FOUND:
        detail = f"File record '{result.id}' not found in index '{result.index}'"
    else:
        detail = result.detail
    raise HTTPException(
        status_code=ERROR_STATUS_CODES[result.status],
        detail=detail,
    )


@router.post(
    "/{index}",
    response_model=OperationResult,
    status_code=status.HTTP_201_CREATED,
    tags=["File Endpoints"],
)
def add_file_record(
    operations: FileOperationsDep,
    index: str,
    record: FileRecord,
) -> OperationResult:
    """
    Index a file record under its own id.
    """
    if not record.id:
        raise HTTPException(
            status_code=422,
            detail="File record id must not be empty",
        )
    return _check(operations.insert(record, index, record.id))


@router.put(
    "/{index}/{id}",
    response_model=OperationResult,
    tags=["File Endpoints"],
)
def put_file_record(
    operations: FileOperationsDep,
    index: str,
    id: str,
    record: FileRecord,
) -> OperationResult:
    """
    Index a file record at the given id, replacing any existing document.
    A body without an id takes the id from the path.
    """
    if "id" not in record.model_fields_set or record.id is None:
        record.id = id
    elif record.id != id:
        raise HTTPException(
            status_code=422,
            detail=f"File record id '{record.id}' does not match '{id}'",
        )
    return _check(operations.insert(record, index, id))


@router.get(
    "/{index}/{id}",
    response_model=FileRecord,
    tags=["File Endpoints"],
)
def get_file_record(
    operations: FileOperationsDep,
    index: str,
    id: str,
) -> FileRecord:
    """
    Retrieve a file record by id.
    """
    return _check(operations.get_by_id(index, id)).to_record()


@router.get(
    "/{index}/{id}/raw",
    response_class=PlainTextResponse,
    tags=["File Endpoints"],
)
def get_file_record_raw(
    operations: FileOperationsDep,
    index: str,
    id: str,
) -> str:
    """
    Retrieve the stored document as a JSON string.

    Always answers 200; a missing document yields "Document was not found".
    """
    return services.get_by_id_as_string(operations, index, id)


@router.patch(
    "/{index}/{id}",
    response_model=OperationResult,
    tags=["File Endpoints"],
)
def update_file_record(
    operations: FileOperationsDep,
    index: str,
    id: str,
    update_request: FileRecordUpdate,
) -> OperationResult:
    """
    Update the supplied fields of a file record, leaving the rest unchanged.
    """
    return _check(operations.update_by_id(update_request, index, id))


@router.delete(
    "/{index}/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["File Endpoints"],
)
def delete_file_record(
    operations: FileOperationsDep,
    index: str,
    id: str,
) -> Response:
    """
    Delete a file record.
    """
    _check(operations.delete_by_id(index, id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
