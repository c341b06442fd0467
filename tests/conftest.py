import copy
import json
import pytest
from fastapi.testclient import TestClient
from opensearchpy.exceptions import ConnectionError, NotFoundError

from core.deps import get_opensearch_client
from main import app


class MockOpenSearchClient:
    """Mock OpenSearch client for testing"""

    def __init__(self):
        self.documents = {}  # Store documents by index
        self.indices_data = {}  # Store index metadata
        self.error_mode = None  # For simulating errors
        self.calls = []  # (operation, kwargs) for every document call

    def simulate_error(self, error_type: str | None):
        """
        Configure client to raise errors like a failing cluster

        Args:
            error_type: "ConnectionError", or None to clear
        """
        self.error_mode = error_type

    def _check_error(self):
        if self.error_mode == "ConnectionError":
            raise ConnectionError(
                "N/A", "Connection refused", OSError("Connection refused")
            )

    def _not_found(self, index: str, id: str):
        return NotFoundError(
            404, "Not Found", {"_index": index, "_id": id, "found": False}
        )

    def index(self, index: str, id: str, body, params=None):
        """Mock index operation"""
        self.calls.append(("index", {"index": index, "id": id, "body": body}))
        self._check_error()
        if isinstance(body, (str, bytes)):
            body = json.loads(body)
        if index not in self.documents:
            self.documents[index] = {}
        result = "updated" if id in self.documents[index] else "created"
        self.documents[index][id] = copy.deepcopy(body)
        return {"_id": id, "_index": index, "result": result}

    def get(self, index: str, id: str, params=None):
        """Mock get operation"""
        self.calls.append(("get", {"index": index, "id": id}))
        self._check_error()
        if id not in self.documents.get(index, {}):
            raise self._not_found(index, id)
        return {
            "_index": index,
            "_id": id,
            "found": True,
            "_source": copy.deepcopy(self.documents[index][id]),
        }

    def delete(self, index: str, id: str, params=None):
        """Mock delete operation"""
        self.calls.append(("delete", {"index": index, "id": id}))
        self._check_error()
        if id not in self.documents.get(index, {}):
            raise self._not_found(index, id)
        del self.documents[index][id]
        return {"_id": id, "_index": index, "result": "deleted"}

    def update(self, index: str, id: str, body: dict, params=None):
        """Mock partial update (doc merge) operation"""
        self.calls.append(
            ("update", {"index": index, "id": id, "body": body, "params": params})
        )
        self._check_error()
        if id not in self.documents.get(index, {}):
            raise self._not_found(index, id)
        self.documents[index][id].update(body.get("doc", {}))
        response = {"_id": id, "_index": index, "result": "updated"}
        if params and params.get("_source") in (True, "true"):
            response["get"] = {
                "found": True,
                "_source": copy.deepcopy(self.documents[index][id]),
            }
        return response

    @property
    def indices(self):
        """Mock indices property"""
        return MockIndices(self)


class MockIndices:
    """Mock indices operations"""

    def __init__(self, client):
        self.client = client

    def exists(self, index: str):
        """Mock index exists check"""
        return index in self.client.indices_data

    def create(self, index: str, body=None):
        """Mock index creation"""
        self.client.indices_data[index] = body or {}
        if index not in self.client.documents:
            self.client.documents[index] = {}
        return {"acknowledged": True}

    def refresh(self, index: str):
        """Mock index refresh"""
        return {"_shards": {"total": 1, "successful": 1, "failed": 0}}


@pytest.fixture(name="mock_opensearch_client")
def mock_opensearch_client_fixture():
    """Provide a mock OpenSearch client for testing"""
    return MockOpenSearchClient()


@pytest.fixture(name="client")
def client_fixture(mock_opensearch_client: MockOpenSearchClient):
    def get_opensearch_client_override():
        return mock_opensearch_client

    app.dependency_overrides[get_opensearch_client] = get_opensearch_client_override

    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="opensearch_client")
def opensearch_client_fixture(mock_opensearch_client: MockOpenSearchClient):
    """Provide the mock OpenSearch client directly for tests that need it"""
    return mock_opensearch_client
