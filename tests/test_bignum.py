# tests/test_bignum.py
from __future__ import annotations

import pytest

from bigfib.bignum import LimbVector, clone, copy, create
from bigfib.fmt import abbr_hex, format_elapsed, format_result, to_hex, trim_hex
from bigfib.utility import InvalidArgumentError, OutOfMemoryError, SizeMismatchError, parse_index

# ---------- LimbVector construction & copy ------------------------------------


@pytest.mark.parametrize("capacity", [1, 2, 8, 500])
def test_create_is_zeroed(capacity):
    v = create(capacity)
    assert v.capacity == capacity
    assert len(v.limbs) == capacity
    assert v.is_zero()
    assert v.sign == 0


@pytest.mark.parametrize("capacity", [0, -1, 2.0, None, True])
def test_create_rejects_bad_capacity(capacity):
    with pytest.raises(InvalidArgumentError):
        create(capacity)


def test_create_out_of_memory_is_reported():
    # far beyond any address space; the allocation fails up front
    with pytest.raises(OutOfMemoryError):
        create(1 << 62)


def test_copy_limbs_and_sign():
    src = LimbVector.from_int(0x1234_5678_9ABC_DEF0, 4)
    src.sign = 1
    dst = create(4)
    copy(dst, src)
    assert dst == src
    assert dst.sign == 1
    assert dst.limbs is not src.limbs


def test_copy_into_wider_vector_clears_high_limbs():
    dst = LimbVector.from_int((1 << 95) | 7, 3)
    src = LimbVector.from_int(5, 2)
    copy(dst, src)
    assert dst.to_int() == 5


def test_copy_into_narrower_vector_is_size_mismatch():
    with pytest.raises(SizeMismatchError):
        copy(create(2), create(3))


@pytest.mark.parametrize("dst_none", [True, False])
def test_copy_with_absent_operand(dst_none):
    v = create(2)
    with pytest.raises(InvalidArgumentError):
        if dst_none:
            copy(None, v)
        else:
            copy(v, None)


def test_clone_is_independent():
    a = LimbVector.from_int(99, 2)
    b = clone(a)
    b.limbs[0] = 1
    assert a.to_int() == 99


def test_from_int_truncates_to_capacity():
    v = LimbVector.from_int((0xAB << 64) | (0xCD << 32) | 0xEF, 2)
    assert v.limbs == [0xEF, 0xCD]


def test_setitem_masks_to_32_bits():
    v = create(1)
    v[0] = 0x1_0000_0005
    assert v[0] == 5


# ---------- Formatter ---------------------------------------------------------


@pytest.mark.parametrize("capacity", [1, 3, 16])
def test_zero_renders_as_zero_blocks(capacity):
    assert to_hex(create(capacity)) == "00000000" * capacity


@pytest.mark.parametrize("value", [0, 1, 0xFFFFFFFF, 1 << 32, (1 << 128) - 1, 12586269025])
def test_hex_length_is_fixed(value):
    v = LimbVector.from_int(value, 4)
    s = to_hex(v)
    assert len(s) == 8 * 4
    assert int(s, 16) == value % (1 << 128)


def test_hex_is_uppercase_msl_first():
    v = create(3)
    v.limbs[:] = [0xDEADBEEF, 0x1, 0xABC]
    assert to_hex(v) == "00000ABC00000001DEADBEEF"


def test_display_helpers():
    assert trim_hex("0000000000000037") == "37"
    assert trim_hex("00000000") == "0"
    assert format_result("0000000000000037", abbreviate=False) == "0x37"
    assert abbr_hex("A" * 10) == "A" * 10
    assert abbr_hex("0123456789" * 10, head=4, tail=4, threshold=20) == "0123…6789"
    assert format_elapsed(512) == "512 ns (512 ns)"
    assert format_elapsed(2_500_000).startswith("2.500 ms")


# ---------- Index text --------------------------------------------------------


@pytest.mark.parametrize("text,expected", [("0", 0), ("42\n", 42), ("  +7 ", 7), ("11000", 11000)])
def test_parse_index_accepts(text, expected):
    assert parse_index(text) == expected


@pytest.mark.parametrize("text", ["", "-1", "abc", "1.5", "0x10", "1 2", None])
def test_parse_index_rejects(text):
    with pytest.raises(InvalidArgumentError):
        parse_index(text)
