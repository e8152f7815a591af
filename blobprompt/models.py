"""
Data models for blobprompt.
"""
import base64
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .commitment import NAMESPACE_ID_SIZE, NAMESPACE_SIZE, create_commitment
from .exceptions import NamespaceFormatError


class Namespace(BaseModel):
    """Versioned, fixed-width namespace tag (1 version byte + 28 ID bytes)"""
    model_config = ConfigDict(frozen=True)

    version: int = Field(..., ge=0, le=255)
    id: bytes

    @field_validator("id")
    @classmethod
    def _check_id_size(cls, value: bytes) -> bytes:
        if len(value) != NAMESPACE_ID_SIZE:
            raise ValueError(f"namespace ID must be {NAMESPACE_ID_SIZE} bytes, got {len(value)}")
        return value

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Namespace":
        """
        Decode a full namespace as returned by the node

        Raises:
            NamespaceFormatError: If raw is not exactly NAMESPACE_SIZE bytes
        """
        if len(raw) != NAMESPACE_SIZE:
            raise NamespaceFormatError(
                f"namespace must be {NAMESPACE_SIZE} bytes, got {len(raw)}",
                value=raw.hex(),
            )
        return cls(version=raw[0], id=bytes(raw[1:]))

    def to_bytes(self) -> bytes:
        return bytes([self.version]) + self.id

    def hex(self) -> str:
        return self.to_bytes().hex()

    def __str__(self) -> str:
        return self.hex()


class Blob(BaseModel):
    """A namespaced payload together with its share commitment"""
    model_config = ConfigDict(frozen=True)

    namespace: Namespace
    data: bytes
    share_version: int = 0
    commitment: bytes
    index: int = -1

    @model_validator(mode="after")
    def _require_data(self) -> "Blob":
        if not self.data:
            raise ValueError("blob data must not be empty")
        return self

    @classmethod
    def new(cls, namespace: Namespace, data: bytes, share_version: int = 0) -> "Blob":
        """
        Create a blob and compute its commitment locally.

        Args:
            namespace: Namespace the blob is posted under
            data: Raw payload bytes (must not be empty)
            share_version: Share format version, only 0 is supported

        Returns:
            Blob with its commitment filled in

        Raises:
            ValueError: If data is empty or the share version is unsupported
        """
        commitment = create_commitment(namespace.to_bytes(), data, share_version)
        return cls(
            namespace=namespace,
            data=data,
            share_version=share_version,
            commitment=commitment,
        )

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def to_rpc(self) -> Dict[str, Any]:
        """Convert to the JSON shape the node's blob API expects"""
        return {
            "namespace": base64.b64encode(self.namespace.to_bytes()).decode("ascii"),
            "data": base64.b64encode(self.data).decode("ascii"),
            "share_version": self.share_version,
            "commitment": base64.b64encode(self.commitment).decode("ascii"),
            "index": self.index,
        }

    @classmethod
    def from_rpc(cls, payload: Dict[str, Any]) -> "Blob":
        """
        Build a blob from a node JSON response

        Raises:
            ValueError: If required fields are missing or not valid base64
        """
        if not isinstance(payload, dict):
            raise ValueError(f"blob must be an object, got {type(payload).__name__}")

        missing = [key for key in ("namespace", "data", "commitment") if key not in payload]
        if missing:
            raise ValueError(f"blob missing fields: {', '.join(missing)}")

        try:
            namespace = Namespace.from_bytes(base64.b64decode(payload["namespace"], validate=True))
            data = base64.b64decode(payload["data"], validate=True)
            commitment = base64.b64decode(payload["commitment"], validate=True)
        except (TypeError, NamespaceFormatError) as e:
            raise ValueError(f"invalid blob encoding: {e}") from e

        return cls(
            namespace=namespace,
            data=data,
            share_version=payload.get("share_version", 0),
            commitment=commitment,
            index=payload.get("index", -1),
        )


class PipelineResult(BaseModel):
    """Outcome of one submit -> fetch -> complete run"""
    height: int
    explorer_link: str
    commitment_hex: str
    fetched_text: str
    response: str
