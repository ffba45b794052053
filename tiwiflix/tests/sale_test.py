"""Fixed-price sale data."""

import pytest

from tiwiflix.core.cells import Address, begin_cell, end_parse, load_std_address
from tiwiflix.core.errors import CapacityError, InvariantViolation
from tiwiflix.network.sale import SaleConfig, cancel_body, is_cancel_body

MARKETPLACE = Address((0, (0xBEEF).to_bytes(32, "big")))
NFT = Address((0, (0x1234).to_bytes(32, "big")))


@pytest.fixture
def sale(owner, royalty):
    return SaleConfig.with_royalty(
        MARKETPLACE, NFT, owner, 1_000_000_000, royalty, fee=20_000_000, created_at=1_700_000_000,
    )


def test_with_royalty(sale, royalty):
    assert sale.royalty_amount == 50_000_000
    assert sale.royalty_address == royalty.address
    assert sale.fee_address == MARKETPLACE
    assert sale.seller_proceeds == 1_000_000_000 - 20_000_000 - 50_000_000


def test_layout(sale, owner):
    s = sale.to_cell().begin_parse()
    assert s.load_bool() is False
    assert s.load_uint(32) == 1_700_000_000
    assert load_std_address(s) == MARKETPLACE
    assert load_std_address(s) == NFT
    assert load_std_address(s) == owner
    assert s.load_coins() == 1_000_000_000

    fees = s.load_ref().begin_parse()
    end_parse(s)
    assert load_std_address(fees) == MARKETPLACE
    assert fees.load_coins() == 20_000_000
    assert load_std_address(fees) == owner
    assert fees.load_coins() == 50_000_000
    end_parse(fees)


def test_round_trip(sale):
    assert SaleConfig.from_cell(sale.to_cell()) == sale


def test_validation(owner):
    with pytest.raises(InvariantViolation):
        SaleConfig(MARKETPLACE, NFT, owner, 100, owner, owner, royalty_amount=60, fee=50, created_at=0)
    with pytest.raises(InvariantViolation):
        SaleConfig(MARKETPLACE, NFT, owner, -1, owner, owner, created_at=0)
    with pytest.raises(CapacityError):
        SaleConfig(MARKETPLACE, NFT, owner, 100, owner, owner, created_at=1 << 32)


def test_deployment(sale):
    code = begin_cell().store_uint(0x5A1E, 16).end_cell()
    state_init, address = sale.deployment(code)
    assert state_init.code == code
    assert state_init.data == sale.to_cell()
    assert address == state_init.address()


def test_cancel_body():
    body = cancel_body()
    assert len(body.bits) == 32
    assert body.begin_parse().load_uint(32) == 1
    assert is_cancel_body(body)
    assert not is_cancel_body(begin_cell().store_uint(1, 32).store_uint(0, 64).end_cell())


def test_cancel_body_with_ref_is_not_a_cancel():
    body = begin_cell().store_uint(1, 32).store_ref(begin_cell().end_cell()).end_cell()
    assert not is_cancel_body(body)
