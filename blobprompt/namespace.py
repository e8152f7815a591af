"""
Namespace codec: hex strings to version-0 blob namespaces.
"""
import binascii
import logging

from .commitment import NAMESPACE_ID_SIZE
from .exceptions import DecodeError, NamespaceFormatError
from .models import Namespace

logger = logging.getLogger(__name__)

NAMESPACE_VERSION_ZERO = 0
# Version-0 IDs are 18 zero bytes followed by up to 10 user bytes
NAMESPACE_VERSION_ZERO_ID_SIZE = 10
NAMESPACE_VERSION_ZERO_PREFIX = b"\x00" * (NAMESPACE_ID_SIZE - NAMESPACE_VERSION_ZERO_ID_SIZE)


def decode_hex(value: str) -> bytes:
    """
    Decode a hex string to bytes.

    Raises:
        DecodeError: If the string has odd length or non-hex characters
    """
    try:
        return binascii.unhexlify(value)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"error decoding hex string {value!r}: {e}", value=value) from e


def new_blob_namespace_v0(sub_id: bytes) -> Namespace:
    """
    Build a version-0 namespace usable for blobs.

    Args:
        sub_id: 1 to 10 user bytes, left-padded with zeros to 10 bytes

    Returns:
        The namespace

    Raises:
        NamespaceFormatError: If sub_id has the wrong size or lands in the reserved range
    """
    if not 0 < len(sub_id) <= NAMESPACE_VERSION_ZERO_ID_SIZE:
        raise NamespaceFormatError(
            f"namespace id must be 1 to {NAMESPACE_VERSION_ZERO_ID_SIZE} bytes, "
            f"but it was {len(sub_id)} bytes",
            value=sub_id.hex(),
        )

    padded = sub_id.rjust(NAMESPACE_VERSION_ZERO_ID_SIZE, b"\x00")
    namespace = Namespace(version=NAMESPACE_VERSION_ZERO, id=NAMESPACE_VERSION_ZERO_PREFIX + padded)

    if is_reserved(namespace):
        raise NamespaceFormatError(
            f"namespace {namespace.hex()} is reserved and cannot be used for blobs",
            value=sub_id.hex(),
        )
    return namespace


def is_reserved(namespace: Namespace) -> bool:
    """True for the primary reserved range (version 0, ID zero except the last byte) and version 255"""
    if namespace.version == 255:
        return True
    return namespace.version == 0 and not any(namespace.id[:-1])


def parse_namespace(value: str) -> Namespace:
    """Decode a user-supplied hex string into a blob namespace."""
    namespace = new_blob_namespace_v0(decode_hex(value))
    logger.debug(f"Decoded namespace {value} -> {namespace.hex()}")
    return namespace
