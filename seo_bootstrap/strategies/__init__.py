"""Generation strategies and the single point that selects one per run.

Quick usage::

    from seo_bootstrap.strategies import StrategyContext, dispatch

    strategy = dispatch("preact")
    plan = await strategy.run(StrategyContext(project=descriptor, settings=settings))
"""

from __future__ import annotations

from seo_bootstrap.models import Strategy
from seo_bootstrap.strategies.base import BaseStrategy, StrategyContext
from seo_bootstrap.strategies.preact import PreactPrerenderStrategy
from seo_bootstrap.strategies.react import ReactSsgStrategy

STRATEGIES: dict[Strategy, type[BaseStrategy]] = {
    Strategy.REACT: ReactSsgStrategy,
    Strategy.PREACT: PreactPrerenderStrategy,
}


def dispatch(strategy: str | Strategy | None) -> BaseStrategy:
    """Return the strategy for *strategy*; unknown values select React."""
    return STRATEGIES[Strategy.parse(strategy)]()


__all__ = [
    "BaseStrategy",
    "PreactPrerenderStrategy",
    "ReactSsgStrategy",
    "STRATEGIES",
    "StrategyContext",
    "dispatch",
]
