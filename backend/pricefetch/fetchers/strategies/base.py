"""Strategy type and the chain runner shared by every provider.

A strategy is a small pure function ``(context, config) -> Optional[Decimal]``.
Providers list them in the order they want them tried; the first one to
produce a price inside the site's sanity bounds wins.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence, Tuple

import structlog

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.site_config import SiteConfiguration

logger = structlog.get_logger(__name__)

StrategyFn = Callable[[ExtractionContext, SiteConfiguration], Optional[Decimal]]


@dataclass(frozen=True)
class Strategy:
    """A named extraction technique with a catalog priority (lower runs first)."""

    name: str
    fn: StrategyFn
    priority: int = 100

    def attempt(self, context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
        return self.fn(context, config)


@dataclass(frozen=True)
class ExtractionOutcome:
    """Result of running a strategy chain."""

    price: Optional[Decimal]
    strategy: Optional[str]
    attempted: Tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.price is not None


def by_priority(strategies: Iterable[Strategy]) -> Tuple[Strategy, ...]:
    """Sort strategies by catalog priority, keeping declaration order for ties."""
    return tuple(sorted(strategies, key=lambda s: s.priority))


def run_chain(
    strategies: Sequence[Strategy],
    context: ExtractionContext,
    config: SiteConfiguration,
    provider: str = "",
) -> ExtractionOutcome:
    """Run strategies in order and return the first sane price.

    An exception inside a strategy is logged and treated as "no result";
    it never stops the chain. Values outside ``config`` bounds are
    discarded.
    """
    log = logger.bind(provider=provider, url=context.url)
    attempted = []

    for strategy in strategies:
        attempted.append(strategy.name)
        try:
            value = strategy.attempt(context, config)
        except Exception as e:
            log.debug(
                "strategy_failed",
                strategy=strategy.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            continue

        if value is None:
            log.debug("strategy_no_result", strategy=strategy.name)
            continue

        if not config.accepts(value):
            log.debug(
                "candidate_out_of_bounds",
                strategy=strategy.name,
                price=str(value),
                min_price=str(config.min_price),
                max_price=str(config.max_price),
            )
            continue

        log.info("price_extracted", strategy=strategy.name, price=str(value))
        return ExtractionOutcome(price=value, strategy=strategy.name, attempted=tuple(attempted))

    log.info("no_candidate_found", attempted=attempted)
    return ExtractionOutcome(price=None, strategy=None, attempted=tuple(attempted))
