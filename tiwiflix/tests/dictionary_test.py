"""HashmapE layout as produced by pytoniq-core's HashMap."""

import random

import pytest

from tiwiflix.core.cells import HashMap, begin_cell, building
from tiwiflix.core.errors import CapacityError


def uint_map(items, key_bits=64):
    hashmap = HashMap(key_bits).with_uint_values(32)
    for key, value in items.items():
        hashmap.set_int_key(key, value)
    return hashmap.serialize()


def read_uint(s):
    return s.load_uint(32)


def test_empty():
    assert uint_map({}) is None


def test_single_key_uses_same_label():
    root = uint_map({0: 7})
    # 11 · 0 · 64 in 7 bits, then the value
    assert len(root.bits) == 10 + 32
    assert root.begin_parse().load_uint(10) == 0b11_0_1000000


def test_single_key_uses_long_label():
    s = uint_map({5: 7}).begin_parse()
    assert s.load_uint(2) == 0b10
    assert s.load_uint(7) == 64
    assert s.load_uint(64) == 5
    assert s.load_uint(32) == 7


def test_fork():
    root = uint_map({0: 1, 1: 2})
    s = root.begin_parse()
    # 63 shared zero bits, then fork on the last bit
    assert s.load_uint(10) == 0b11_0_0111111
    assert s.remaining_bits == 0
    assert len(root.refs) == 2
    for ref, value in zip(root.refs, (1, 2)):
        leaf = ref.begin_parse()
        assert leaf.load_uint(2) == 0b00
        assert leaf.load_uint(32) == value


def test_short_label():
    # 4-bit keys 0b0110 and 0b0111: label "011" costs 8 bits short, 8 long
    s = uint_map({6: 1, 7: 2}, key_bits=4).begin_parse()
    assert s.load_uint(1) == 0
    assert s.load_uint(4) == 0b1110
    assert s.load_uint(3) == 0b011


def test_insertion_order_does_not_matter():
    keys = [3, 1, 2, 7, 1000, 2 ** 63, 42]
    forward = {k: (k * 2) % 2 ** 32 for k in keys}
    backward = {k: (k * 2) % 2 ** 32 for k in reversed(keys)}
    assert uint_map(forward).to_boc() == uint_map(backward).to_boc()


def test_parse():
    rng = random.Random(7)
    items = {rng.getrandbits(64): rng.getrandbits(32) for _ in range(80)}
    root = uint_map(items)
    assert HashMap.parse(root.begin_parse(), 64, value_deserializer=read_uint) == items


def test_stored_as_maybe_ref():
    root = uint_map({1: 1})
    cell = begin_cell().store_dict(root).store_dict(None).end_cell()
    s = cell.begin_parse()
    assert s.load_maybe_ref() == root
    assert s.load_maybe_ref() is None


def test_key_out_of_range():
    with pytest.raises(CapacityError):
        with building("dictionary"):
            HashMap(64).with_uint_values(32).set_int_key(1 << 64, 1)
