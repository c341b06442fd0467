"""
Define functions/aliases for dependency injection
"""
from collections.abc import Generator
from typing import Annotated, TypeAlias
from fastapi import Depends, HTTPException, status
from opensearchpy import OpenSearch

from core.opensearch import get_opensearch_client as build_opensearch_client
from api.files.services import FileDocumentOperations, OpenSearchFileOperations


def get_opensearch_client() -> Generator[OpenSearch, None, None]:
  client = build_opensearch_client()
  if client is None:
    raise HTTPException(
      status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
      detail="OpenSearch client is not available."
    )
  yield client


OpenSearchDep: TypeAlias = Annotated[OpenSearch, Depends(get_opensearch_client)]


def get_file_operations(client: OpenSearchDep) -> FileDocumentOperations:
  return OpenSearchFileOperations(client)


FileOperationsDep: TypeAlias = Annotated[
  FileDocumentOperations, Depends(get_file_operations)
]
