"""
Tests for the namespace codec.
"""
import pytest
from hypothesis import assume, given, settings, strategies as st

from blobprompt.exceptions import DecodeError, NamespaceError, NamespaceFormatError
from blobprompt.models import Namespace
from blobprompt.namespace import (
    NAMESPACE_VERSION_ZERO_PREFIX,
    decode_hex,
    is_reserved,
    new_blob_namespace_v0,
    parse_namespace,
)

HEX_CHARS = "0123456789abcdefABCDEF"

# 1..10 user bytes that do not land in the reserved range once padded
sub_id_strategy = st.binary(min_size=1, max_size=10).filter(
    lambda b: any(b.rjust(10, b"\x00")[:9])
)


def test_parse_namespace_full_width():
    """A 10-byte sub-ID becomes 18 zero bytes + the sub-ID under version 0"""
    ns = parse_namespace("0102030405060708090a")

    assert ns.version == 0
    assert ns.id == b"\x00" * 18 + bytes.fromhex("0102030405060708090a")
    assert len(ns.to_bytes()) == 29
    assert ns.hex() == "00" + "00" * 18 + "0102030405060708090a"


def test_parse_namespace_short_input_is_left_padded():
    ns = parse_namespace("abcd")
    assert ns.id[-10:] == b"\x00" * 8 + b"\xab\xcd"
    assert ns == parse_namespace("0000abcd")
    assert parse_namespace("01ff") == parse_namespace("0001ff")


def test_parse_namespace_accepts_uppercase_hex():
    assert parse_namespace("0102030405060708090A") == parse_namespace("0102030405060708090a")


@pytest.mark.parametrize("value", ["abc", "0", "0102030405060708090"])
def test_odd_length_hex_raises_decode_error(value):
    with pytest.raises(DecodeError, match="error decoding hex string") as exc:
        parse_namespace(value)
    assert exc.value.value == value


@pytest.mark.parametrize("value", ["zz", "0x01", "01 02", "0102030405060708090g", "ééé"])
def test_invalid_characters_raise_decode_error(value):
    with pytest.raises(DecodeError):
        parse_namespace(value)


def test_empty_namespace_raises_format_error():
    with pytest.raises(NamespaceFormatError, match="but it was 0 bytes"):
        parse_namespace("")


def test_too_long_namespace_raises_format_error():
    with pytest.raises(NamespaceFormatError, match="but it was 11 bytes"):
        parse_namespace("0102030405060708090a0b")


@pytest.mark.parametrize("value", ["01", "00", "ff", "00000000000000000004"])
def test_reserved_namespace_rejected(value):
    with pytest.raises(NamespaceFormatError, match="reserved"):
        parse_namespace(value)


def test_namespace_errors_share_a_base():
    assert issubclass(DecodeError, NamespaceError)
    assert issubclass(NamespaceFormatError, NamespaceError)


def test_decode_hex():
    assert decode_hex("00ff10") == b"\x00\xff\x10"


def test_is_reserved_for_version_255():
    ns = Namespace(version=255, id=b"\xff" * 28)
    assert is_reserved(ns)


def test_new_blob_namespace_v0_prefix():
    ns = new_blob_namespace_v0(b"\x01" * 10)
    assert ns.id.startswith(NAMESPACE_VERSION_ZERO_PREFIX)


@settings(max_examples=100)
@given(sub_id=sub_id_strategy)
def test_parse_namespace_is_deterministic(sub_id):
    """Same hex input always decodes to the same namespace bytes"""
    value = sub_id.hex()
    first = parse_namespace(value)
    second = parse_namespace(value)

    assert first.to_bytes() == second.to_bytes()
    assert first.id.endswith(sub_id)
    assert len(first.to_bytes()) == 29


@settings(max_examples=100)
@given(a=st.binary(min_size=10, max_size=10), b=st.binary(min_size=10, max_size=10))
def test_distinct_full_width_inputs_give_distinct_namespaces(a, b):
    assume(a != b)
    assume(any(a[:9]) and any(b[:9]))
    assert parse_namespace(a.hex()) != parse_namespace(b.hex())


@settings(max_examples=100)
@given(value=st.text(alphabet=HEX_CHARS, min_size=1, max_size=41).filter(lambda s: len(s) % 2 == 1))
def test_odd_length_always_fails(value):
    with pytest.raises(DecodeError):
        parse_namespace(value)


@settings(max_examples=100)
@given(
    prefix=st.text(alphabet=HEX_CHARS, max_size=8),
    bad=st.characters(exclude_characters=HEX_CHARS),
)
def test_non_hex_character_always_fails(prefix, bad):
    value = prefix + bad
    if len(value) % 2:
        value += "0"
    with pytest.raises(DecodeError):
        parse_namespace(value)


@settings(max_examples=50)
@given(raw=st.binary(min_size=11, max_size=64))
def test_oversized_inputs_always_fail(raw):
    with pytest.raises(NamespaceFormatError):
        parse_namespace(raw.hex())
