"""
Line handler registry deciding which adapter lines are worth parsing.
"""

import re
import logging
from typing import Callable, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

READY_MARKER = "waiting for input"
TRAFFIC_PATTERN = re.compile(r"^TRAFFIC:")


@dataclass
class LineHandler:
    """
    One line matcher bound to a callback.

    Exactly one of ``contains``, ``match`` or ``fn`` is set.
    """

    callback: Callable[[str], None]
    contains: Optional[str] = None
    match: Optional[re.Pattern] = None
    fn: Optional[Callable[[str], bool]] = None

    def __post_init__(self):
        kinds = [k for k in (self.contains, self.match, self.fn) if k is not None]
        if len(kinds) != 1:
            raise ValueError("LineHandler needs exactly one of contains, match or fn")

    def matches(self, line: str) -> bool:
        """Test the rule against a line."""
        if self.contains is not None:
            return self.contains in line
        if self.match is not None:
            return len(self.match.findall(line)) > 0
        return bool(self.fn(line))


class LineHandlerRegistry:
    """
    Ordered list of line handlers.

    By default only the first registered handler is examined for each line,
    whether or not it matches. Set ``evaluate_all`` to run every handler
    whose rule matches, in order.
    """

    def __init__(self, handlers: List[LineHandler], evaluate_all: bool = False):
        self.handlers = list(handlers)
        self.evaluate_all = evaluate_all

    @classmethod
    def default(
        cls,
        on_ready: Callable[[str], None],
        on_traffic: Callable[[str], None],
        evaluate_all: bool = False,
    ) -> "LineHandlerRegistry":
        """Build the readiness + traffic registry."""
        return cls(
            [
                LineHandler(callback=on_ready, contains=READY_MARKER),
                LineHandler(callback=on_traffic, match=TRAFFIC_PATTERN),
            ],
            evaluate_all=evaluate_all,
        )

    def process(self, line: str) -> int:
        """
        Run the handlers against a line.

        Returns:
            Number of callbacks invoked
        """
        invoked = 0
        for handler in self.handlers:
            if handler.matches(line):
                handler.callback(line)
                invoked += 1

            if not self.evaluate_all:
                break

        return invoked
