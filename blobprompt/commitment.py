"""
Share splitting and blob commitments.

The node's submit call only returns the inclusion height, so the commitment
needed to fetch a blob back is computed here the same way the network
computes it for share version 0:

1. the blob is split into fixed-size shares,
2. the shares are grouped into power-of-two subtrees,
3. each subtree is reduced to a namespaced merkle tree (NMT) root,
4. the subtree roots are reduced with an RFC 6962 merkle tree.
"""
import hashlib
import math
from typing import List

SHARE_SIZE = 512
NAMESPACE_VERSION_SIZE = 1
NAMESPACE_ID_SIZE = 28
NAMESPACE_SIZE = NAMESPACE_VERSION_SIZE + NAMESPACE_ID_SIZE
SHARE_INFO_BYTES = 1
SEQUENCE_LEN_BYTES = 4
FIRST_SHARE_CONTENT_SIZE = SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES - SEQUENCE_LEN_BYTES
CONTINUATION_SHARE_CONTENT_SIZE = SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES
SUBTREE_ROOT_THRESHOLD = 64
SUPPORTED_SHARE_VERSIONS = (0,)

PARITY_NAMESPACE = b"\xff" * NAMESPACE_SIZE

LEAF_PREFIX = b"\x00"
NODE_PREFIX = b"\x01"


def _sha256(*parts: bytes) -> bytes:
    h = hashlib.sha256()
    for part in parts:
        h.update(part)
    return h.digest()


def round_up_power_of_two(n: int) -> int:
    if n < 1:
        raise ValueError(f"expected a positive integer, got {n}")
    result = 1
    while result < n:
        result <<= 1
    return result


def round_down_power_of_two(n: int) -> int:
    if n < 1:
        raise ValueError(f"expected a positive integer, got {n}")
    return 1 << (n.bit_length() - 1)


def _split_point(length: int) -> int:
    # Largest power of two strictly less than length
    k = 1 << (length.bit_length() - 1)
    if k == length:
        k >>= 1
    return k


def share_count(data_len: int) -> int:
    """Number of shares a blob of data_len bytes occupies"""
    if data_len <= FIRST_SHARE_CONTENT_SIZE:
        return 1
    remaining = data_len - FIRST_SHARE_CONTENT_SIZE
    return 1 + -(-remaining // CONTINUATION_SHARE_CONTENT_SIZE)


def split_shares(namespace: bytes, data: bytes, share_version: int = 0) -> List[bytes]:
    """
    Split blob data into sparse shares.

    Args:
        namespace: Full namespace bytes (version + ID)
        data: Blob payload
        share_version: Share format version

    Returns:
        List of SHARE_SIZE-byte shares

    Raises:
        ValueError: If the namespace size or share version is invalid, or data is empty
    """
    if len(namespace) != NAMESPACE_SIZE:
        raise ValueError(f"namespace must be {NAMESPACE_SIZE} bytes, got {len(namespace)}")
    if share_version not in SUPPORTED_SHARE_VERSIONS:
        raise ValueError(f"unsupported share version: {share_version}")
    if not data:
        raise ValueError("blob data must not be empty")

    shares = []
    first_info = bytes([(share_version << 1) | 1])
    shares.append(
        namespace
        + first_info
        + len(data).to_bytes(SEQUENCE_LEN_BYTES, "big")
        + data[:FIRST_SHARE_CONTENT_SIZE]
    )

    continuation_info = bytes([share_version << 1])
    for start in range(FIRST_SHARE_CONTENT_SIZE, len(data), CONTINUATION_SHARE_CONTENT_SIZE):
        chunk = data[start:start + CONTINUATION_SHARE_CONTENT_SIZE]
        shares.append(namespace + continuation_info + chunk)

    return [share.ljust(SHARE_SIZE, b"\x00") for share in shares]


def blob_min_square_size(count: int) -> int:
    return round_up_power_of_two(math.ceil(math.sqrt(count)))


def subtree_width(count: int, threshold: int = SUBTREE_ROOT_THRESHOLD) -> int:
    """Maximum number of shares per subtree for a blob of count shares"""
    width = round_up_power_of_two(-(-count // threshold))
    return min(width, blob_min_square_size(count))


def merkle_mountain_range_sizes(total: int, max_tree_size: int) -> List[int]:
    sizes = []
    while total:
        size = max_tree_size if total >= max_tree_size else round_down_power_of_two(total)
        sizes.append(size)
        total -= size
    return sizes


def _nmt_leaf(leaf: bytes) -> bytes:
    ns = leaf[:NAMESPACE_SIZE]
    return ns + ns + _sha256(LEAF_PREFIX, leaf)


def _nmt_node(left: bytes, right: bytes) -> bytes:
    left_min, left_max = left[:NAMESPACE_SIZE], left[NAMESPACE_SIZE:2 * NAMESPACE_SIZE]
    right_min, right_max = right[:NAMESPACE_SIZE], right[NAMESPACE_SIZE:2 * NAMESPACE_SIZE]

    min_ns = min(left_min, right_min)
    if right_min == PARITY_NAMESPACE:
        max_ns = left_max
    else:
        max_ns = max(left_max, right_max)
    return min_ns + max_ns + _sha256(NODE_PREFIX, left, right)


def nmt_root(leaves: List[bytes]) -> bytes:
    """Root of a namespaced merkle tree over already namespace-prefixed leaves"""
    if not leaves:
        return b"\x00" * (2 * NAMESPACE_SIZE) + _sha256()
    if len(leaves) == 1:
        return _nmt_leaf(leaves[0])
    k = _split_point(len(leaves))
    return _nmt_node(nmt_root(leaves[:k]), nmt_root(leaves[k:]))


def merkle_root(items: List[bytes]) -> bytes:
    """RFC 6962 merkle root"""
    if not items:
        return _sha256()
    if len(items) == 1:
        return _sha256(LEAF_PREFIX, items[0])
    k = _split_point(len(items))
    return _sha256(NODE_PREFIX, merkle_root(items[:k]), merkle_root(items[k:]))


def create_commitment(namespace: bytes, data: bytes, share_version: int = 0) -> bytes:
    """
    Compute the 32-byte share commitment of a blob.

    Args:
        namespace: Full namespace bytes (version + ID)
        data: Blob payload
        share_version: Share format version

    Returns:
        Commitment bytes

    Raises:
        ValueError: If the blob cannot be split into shares
    """
    shares = split_shares(namespace, data, share_version)
    width = subtree_width(len(shares))

    roots = []
    cursor = 0
    for size in merkle_mountain_range_sizes(len(shares), width):
        # NMT leaves carry the namespace in front of the share, which itself starts with it
        leaves = [namespace + share for share in shares[cursor:cursor + size]]
        roots.append(nmt_root(leaves))
        cursor += size

    return merkle_root(roots)
