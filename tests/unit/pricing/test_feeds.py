"""Tests for relay price feeds."""

from decimal import Decimal

import pytest

from relayswap.errors import UnavailableDataError
from relayswap.pricing.feeds import (
    build_relay_feeds,
    calculate_liquidity_depth,
    calculate_price_both_ways,
)
from tests.helpers import TLOS, USDT, make_relay, qty


class TestPriceBothWays:
    def test_other_side_priced_from_balance_ratio(self, tlos_usdt_relay) -> None:
        prices = calculate_price_both_ways(tlos_usdt_relay, {"USDT": Decimal(1)})
        assert prices[USDT] == Decimal(1)
        # 20,000 USDT per 100,000 TLOS
        assert prices[TLOS] == Decimal("0.2")

    def test_anchor_on_first_known_reserve(self, tlos_usdt_relay) -> None:
        prices = calculate_price_both_ways(
            tlos_usdt_relay, {"TLOS": Decimal("0.25"), "USDT": Decimal(1)}
        )
        assert prices[TLOS] == Decimal("0.25")
        assert prices[USDT] == Decimal("1.25")

    def test_no_known_price(self, tlos_usdt_relay) -> None:
        with pytest.raises(UnavailableDataError, match="No known price"):
            calculate_price_both_ways(tlos_usdt_relay, {"PBTC": Decimal(60_000)})

    def test_zero_reserve(self) -> None:
        relay = make_relay(qty(0, TLOS), qty(100, USDT))
        with pytest.raises(UnavailableDataError):
            calculate_price_both_ways(relay, {"USDT": Decimal(1)})


class TestLiquidityDepth:
    def test_known_side_value(self, tlos_usdt_relay) -> None:
        assert calculate_liquidity_depth(tlos_usdt_relay, {"USDT": Decimal(1)}) == Decimal(20_000)
        assert calculate_liquidity_depth(tlos_usdt_relay, {"TLOS": Decimal("0.2")}) == Decimal(20_000)


class TestBuildFeeds:
    def test_one_feed_per_reserve(self, tlos_usdt_relay) -> None:
        feeds = build_relay_feeds(tlos_usdt_relay, {"USDT": Decimal(1)})
        assert [feed.token for feed in feeds] == [TLOS, USDT]
        assert {feed.relay_id for feed in feeds} == {tlos_usdt_relay.id}
        assert all(feed.liquidity_depth == Decimal(20_000) for feed in feeds)
