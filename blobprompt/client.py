"""
BlobClient - JSON-RPC client for a data-availability node's blob API.
"""
import base64
import itertools
import logging
import urllib.parse
from typing import Any, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import DEFAULT_EXPLORER_URL, DEFAULT_GAS_PRICE, DEFAULT_RETRY_COUNT, DEFAULT_TIMEOUT
from .exceptions import FetchError, NodeConnectionError, SubmissionError
from .models import Blob, Namespace


class BlobClient:
    """
    Client for submitting and retrieving blobs through a node's RPC endpoint.

    The client holds a single HTTP session for its lifetime. Use it as a
    context manager, or call ``close()`` when done.

    Nothing is retried unless ``retry_count`` is raised above zero.
    """

    def __init__(
        self,
        node_url: str,
        auth_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_count: int = DEFAULT_RETRY_COUNT,
        gas_price: float = DEFAULT_GAS_PRICE,
        explorer_url: str = DEFAULT_EXPLORER_URL,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the BlobClient

        Args:
            node_url: Node RPC endpoint (e.g., "http://localhost:26658")
            auth_token: JWT for the node's RPC auth, None when auth is disabled
            timeout: Timeout for each RPC call in seconds
            retry_count: Number of retries for failed HTTP requests
            gas_price: Gas price sent with submissions, negative for the node default
            explorer_url: Base URL of the block explorer used for links
            logger: Optional logger instance to use for debug/info logging

        Raises:
            NodeConnectionError: If node_url is not an http(s) URL with a host
        """
        parsed = urllib.parse.urlparse(node_url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise NodeConnectionError(
                f"Failed to create client: node URL must be http(s)://host[:port], got {node_url!r}"
            )

        self.node_url = node_url
        self.timeout = timeout
        self.gas_price = gas_price
        self.explorer_url = explorer_url.rstrip('/')
        self.logger = logger or logging.getLogger(__name__)
        self._ids = itertools.count(1)

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if auth_token:
            self.session.headers["Authorization"] = f"Bearer {auth_token}"

        retries = Retry(
            total=retry_count,
            connect=retry_count,
            read=retry_count,
            other=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

    def __enter__(self) -> "BlobClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()

    def explorer_link(self, height: int) -> str:
        return f"{self.explorer_url}/block/{height}"

    def submit(self, namespace: Namespace, payload: bytes) -> Tuple[Blob, int]:
        """
        Create a blob and submit it to the network

        Args:
            namespace: Namespace to post the blob under
            payload: Raw blob data

        Returns:
            The submitted blob (with its commitment) and its inclusion height

        Raises:
            SubmissionError: If the blob cannot be built, the node rejects it,
                or the round trip fails
        """
        try:
            blob = Blob.new(namespace, payload)
        except ValueError as e:
            raise SubmissionError(f"Failed to create blob: {e}") from e

        result = self._call("blob.Submit", [[blob.to_rpc()], self.gas_price], SubmissionError, "submit")

        if isinstance(result, bool) or not isinstance(result, int) or result <= 0:
            raise SubmissionError(f"Failed to submit blob: unexpected height in response: {result!r}")

        height = result
        self.logger.info(f"Blob submitted successfully at height: {height}!")
        self.logger.info(f"Explorer link: {self.explorer_link(height)}")
        return blob, height

    def get(self, height: int, namespace: Namespace, commitment: bytes) -> Blob:
        """
        Fetch a blob by its coordinates

        Args:
            height: Block height the blob was included at
            namespace: Namespace the blob was posted under
            commitment: Commitment of the blob

        Returns:
            The blob as stored by the network

        Raises:
            FetchError: If the blob is absent or the round trip fails
        """
        params = [
            height,
            base64.b64encode(namespace.to_bytes()).decode("ascii"),
            base64.b64encode(commitment).decode("ascii"),
        ]
        result = self._call("blob.Get", params, FetchError, "fetch")

        if result is None:
            raise FetchError(f"Failed to fetch blob: no blob at height {height} for namespace {namespace.hex()}")

        try:
            return Blob.from_rpc(result)
        except ValueError as e:
            raise FetchError(f"Failed to fetch blob: malformed blob in response: {e}") from e

    def _call(self, method: str, params: List[Any], error_cls: type, action: str) -> Any:
        """
        Perform one JSON-RPC call

        Args:
            method: RPC method name
            params: Positional parameters
            error_cls: BlobError subclass raised on any failure
            action: Verb used in error messages ("submit" or "fetch")

        Returns:
            The ``result`` member of the response
        """
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        self.logger.debug(f"RPC request {method}: {self._sanitize_params(method, params)}")

        try:
            response = self.session.post(self.node_url, json=body, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            self.logger.debug(f"{method} request failed: {e}")
            raise error_cls(f"Failed to {action} blob: {e}") from e
        except ValueError as e:
            self.logger.debug(f"Invalid JSON response from node: {e}")
            raise error_cls(f"Failed to {action} blob: invalid JSON response: {e}") from e

        if not isinstance(payload, dict):
            raise error_cls(f"Failed to {action} blob: unexpected response: {payload!r}")

        error = payload.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", error) if isinstance(error, dict) else error
            raise error_cls(f"Failed to {action} blob: {message}", rpc_code=code)

        if "result" not in payload:
            raise error_cls(f"Failed to {action} blob: response has no result: {payload!r}")

        return payload["result"]

    def _sanitize_params(self, method: str, params: List[Any]) -> List[Any]:
        """
        Replace blob data with a length marker for logging

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            Params safe to log
        """
        if method != "blob.Submit" or not params or not isinstance(params[0], list):
            return params

        blobs = []
        for blob in params[0]:
            safe = dict(blob)
            if "data" in safe:
                safe["data"] = f"[REDACTED - {len(str(safe['data']))} chars]"
            blobs.append(safe)
        return [blobs] + list(params[1:])


__all__ = ["BlobClient"]
