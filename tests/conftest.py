"""
Pytest fixtures for the blobprompt tests.
"""
import logging
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from blobprompt.client import BlobClient
from blobprompt.config import Settings

# Constants for testing
TEST_NODE_URL = "http://localhost:26658"
TEST_NAMESPACE_HEX = "0102030405060708090a"
TEST_OPENAI_KEY = "sk-test-0123456789"
TEST_HEIGHT = 42


class FakeNode:
    """
    In-memory stand-in for a node's blob JSON-RPC API.

    Submitted blobs are stored under (height, namespace, commitment) exactly
    as they arrived, and blob.Get returns them from there. Set ``store`` to
    False to accept submissions without keeping them.
    """

    def __init__(self, height: int = TEST_HEIGHT):
        self.height = height
        self.store = True
        self.blobs = {}
        self.requests = []

    @property
    def methods(self):
        return [body["method"] for body in self.requests]

    def __call__(self, request, context):
        body = request.json()
        self.requests.append(body)
        method, params = body["method"], body["params"]

        if method == "blob.Submit":
            if self.store:
                for blob in params[0]:
                    self.blobs[(self.height, blob["namespace"], blob["commitment"])] = blob
            return {"jsonrpc": "2.0", "id": body["id"], "result": self.height}

        if method == "blob.Get":
            height, namespace, commitment = params
            blob = self.blobs.get((height, namespace, commitment))
            if blob is None:
                return {"jsonrpc": "2.0", "id": body["id"], "error": {"code": 1, "message": "blob: not found"}}
            return {"jsonrpc": "2.0", "id": body["id"], "result": dict(blob, index=0)}

        return {"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": "method not found"}}


def make_completion(*contents):
    """Build an object shaped like an OpenAI chat completion response"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )


@pytest.fixture
def test_env():
    return {"OPENAI_KEY": TEST_OPENAI_KEY}


@pytest.fixture
def settings(test_env):
    return Settings.from_env(test_env)


@pytest.fixture
def fake_node(requests_mock):
    node = FakeNode()
    requests_mock.post(TEST_NODE_URL, json=node)
    return node


@pytest.fixture
def blob_client():
    client = BlobClient(TEST_NODE_URL, logger=logging.getLogger("blobprompt.tests"))
    yield client
    client.close()


@pytest.fixture
def mock_openai():
    """Patch the OpenAI constructor used by CompletionClient; yields the mock instance"""
    with patch("blobprompt.completion.OpenAI") as mock_cls:
        instance = MagicMock()
        instance.chat.completions.create.return_value = make_completion("stubbed reply")
        mock_cls.return_value = instance
        yield instance
