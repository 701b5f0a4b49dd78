"""Registry - directory of markets by id. Holds references only, never touches a ledger."""

from __future__ import annotations

import threading
from typing import Any

import structlog

from wagerbook.config.settings import Settings
from wagerbook.engine.market import Market
from wagerbook.errors import DuplicateMarketId
from wagerbook.ledger.capability import AdminCapability
from wagerbook.models.market import PayoutPolicy
from wagerbook.notify.sinks import EventSink

log = structlog.get_logger(__name__)


class Registry:
    """Append-only mapping market_id -> Market. Construct once and pass it around."""

    def __init__(self, *, sink: EventSink | None = None, settings: Settings | None = None) -> None:
        self._sink = sink
        self._settings = settings or Settings()
        self._markets: dict[str, Market] = {}
        self._lock = threading.Lock()

    @classmethod
    def create(cls, *, sink: EventSink | None = None, settings: Settings | None = None) -> Registry:
        return cls(sink=sink, settings=settings)

    def create_market(
        self,
        market_id: str,
        outcomes_csv: str,
        odds_csv: str,
        *,
        min_bet: Any = None,
        max_bet: Any = None,
        policy: PayoutPolicy | str | None = None,
    ) -> AdminCapability:
        """Create a market titled market_id and register it. Returns its admin capability.

        Bet bounds and policy default to the [market] settings. Raises
        DuplicateMarketId if the id is taken, InvalidConfig on bad parameters.
        """
        with self._lock:
            if market_id in self._markets:
                log.warning("duplicate_market_id", market_id=market_id)
                raise DuplicateMarketId(f"Market '{market_id}' already exists.")
            market, capability = Market.create(
                market_id,
                outcomes_csv,
                odds_csv,
                self._settings.default_min_bet if min_bet is None else min_bet,
                self._settings.default_max_bet if max_bet is None else max_bet,
                policy,
                sink=self._sink,
                settings=self._settings,
            )
            self._markets[market_id] = market
        log.info("market_registered", market_id=market_id, total_markets=len(self._markets))
        return capability

    def register(self, market: Market) -> None:
        """Add an existing market under its market_id."""
        with self._lock:
            if market.market_id in self._markets:
                log.warning("duplicate_market_id", market_id=market.market_id)
                raise DuplicateMarketId(f"Market '{market.market_id}' already exists.")
            self._markets[market.market_id] = market
        log.info("market_registered", market_id=market.market_id, total_markets=len(self._markets))

    def get_market(self, market_id: str) -> Market | None:
        with self._lock:
            return self._markets.get(market_id)

    def list_markets(self) -> list[str]:
        with self._lock:
            return list(self._markets)

    def __contains__(self, market_id: object) -> bool:
        with self._lock:
            return market_id in self._markets

    def __len__(self) -> int:
        with self._lock:
            return len(self._markets)
