"""
Caller-owned holder for the result currently on screen.

Refreshes are not cancelled when a new one starts. Each cycle takes a ticket
when it begins; a finished cycle is only published if no cycle that began
after it has already published, so a slow stale refresh can never replace a
fresher result.
"""

import itertools
import logging
from typing import Awaitable, Callable, Optional

from ..models import AggregateResult


logger = logging.getLogger(__name__)


class AggregateViewState:
    """Latest published AggregateResult for one screen or controller."""

    def __init__(self):
        self._tickets = itertools.count(1)
        self._published_ticket = 0
        self._result: Optional[AggregateResult] = None

    @property
    def result(self) -> Optional[AggregateResult]:
        return self._result

    @property
    def published_ticket(self) -> int:
        return self._published_ticket

    def begin_cycle(self) -> int:
        """Issue the ticket for a new aggregation cycle."""
        return next(self._tickets)

    def publish(self, ticket: int, result: AggregateResult) -> bool:
        """
        Install a finished cycle's result.

        Returns:
            True if the result is now displayed, False if it was stale
        """
        if ticket <= self._published_ticket:
            logger.info(
                f"Dropping stale aggregation result from cycle {ticket}",
                extra={"ticket": ticket, "published_ticket": self._published_ticket}
            )
            return False

        self._published_ticket = ticket
        self._result = result
        return True

    async def refresh(self, run_cycle: Callable[[], Awaitable[AggregateResult]]) -> Optional[AggregateResult]:
        """
        Run one cycle and publish it if it is still the freshest.

        Args:
            run_cycle: Zero-argument coroutine factory, typically a bound
                ``aggregate`` call

        Returns:
            The result currently displayed after this cycle
        """
        ticket = self.begin_cycle()
        result = await run_cycle()
        self.publish(ticket, result)
        return self._result

    def clear(self) -> None:
        self._result = None
