"""
"First success wins" combinator for ordered fallback chains.

A chain is a list of named strategies tried in order. Each strategy may carry
its own timeout. A strategy fails when it raises, times out or returns None;
the first one to produce a value wins.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, NamedTuple, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class Strategy(NamedTuple):
    name: str
    run: Callable[[], Awaitable[Any]]
    timeout: Optional[float] = None


class StrategyChainExhausted(Exception):
    """Raised when every strategy in a chain failed"""

    def __init__(self, label: str, failures: List[Tuple[str, str]]):
        self.label = label
        self.failures = failures
        detail = "; ".join(f"{name}: {reason}" for name, reason in failures) or "no strategies"
        super().__init__(f"{label}: all strategies failed ({detail})")


async def first_success(strategies: Sequence[Strategy], label: str = "chain") -> Any:
    """
    Run strategies in order and return the first non-None result

    Args:
        strategies: Ordered strategies to try
        label: Name used in log messages

    Returns:
        The winning strategy's result

    Raises:
        StrategyChainExhausted: if no strategy produced a value
    """
    failures: List[Tuple[str, str]] = []

    for strategy in strategies:
        try:
            if strategy.timeout is not None:
                result = await asyncio.wait_for(strategy.run(), timeout=strategy.timeout)
            else:
                result = await strategy.run()
        except asyncio.TimeoutError:
            reason = f"timed out after {strategy.timeout}s"
        except asyncio.CancelledError:
            raise
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
        else:
            if result is not None:
                if failures:
                    logger.info("%s: served by '%s' after %d failed strategies", label, strategy.name, len(failures))
                return result
            reason = "no result"

        logger.warning("%s: strategy '%s' failed (%s)", label, strategy.name, reason)
        failures.append((strategy.name, reason))

    raise StrategyChainExhausted(label, failures)
