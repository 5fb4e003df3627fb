"""
Spending limits for outbound language calls.

Enforcement Order:
1. Per-call max cost - projected input cost of the request about to be sent
2. Budget limit - accumulated spend of completed calls
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .pricing import estimate
from .token_counter import TokenUsage

logger = logging.getLogger(__name__)


class BreachAction(Enum):
    """Actions to take when a limit is breached."""
    WARN = "warn"
    BLOCK = "block"


class BudgetExceeded(Exception):
    """Raised when a limit is breached with the BLOCK action."""
    def __init__(self, message: str, action: BreachAction = BreachAction.BLOCK):
        super().__init__(message)
        self.action = action


@dataclass(frozen=True)
class BudgetConfig:
    """Limits in USD. None disables a limit."""
    max_cost_per_call: Optional[float] = None
    budget_limit: Optional[float] = None
    on_breach: BreachAction = BreachAction.BLOCK

    def __post_init__(self):
        """Validate limits are positive."""
        if self.max_cost_per_call is not None and self.max_cost_per_call <= 0:
            raise ValueError("max_cost_per_call must be > 0")
        if self.budget_limit is not None and self.budget_limit <= 0:
            raise ValueError("budget_limit must be > 0")


class BudgetGuard:
    """Tracks estimated spend for one agent and enforces its limits."""

    def __init__(self, config: BudgetConfig):
        self.config = config
        self.spent = 0.0

    @property
    def remaining(self) -> Optional[float]:
        if self.config.budget_limit is None:
            return None
        return self.config.budget_limit - self.spent

    def check(self, model: str, prompt_text: str) -> Optional[BreachAction]:
        """Check limits before a call is sent.

        Args:
            model: Model the call will use
            prompt_text: Full prompt text, used to project input cost

        Returns:
            The breach action taken, or None if within limits

        Raises:
            BudgetExceeded: If a limit is breached and on_breach is BLOCK
        """
        message = None

        projected = estimate(model, prompt_text, 0)
        if (self.config.max_cost_per_call is not None and
                projected > self.config.max_cost_per_call):
            message = (
                f"Projected call cost ${projected:.6f} exceeds maximum allowed "
                f"${self.config.max_cost_per_call:.6f} for {model}"
            )
        elif self.remaining is not None and self.remaining <= 0:
            message = (
                f"Budget limit of ${self.config.budget_limit:.2f} reached. "
                f"Current spend: ${self.spent:.6f}"
            )

        if message is None:
            return None
        if self.config.on_breach == BreachAction.BLOCK:
            raise BudgetExceeded(message, BreachAction.BLOCK)
        logger.warning(message)
        return BreachAction.WARN

    def charge(self, model: str, usage: TokenUsage) -> float:
        """Add the estimated cost of a completed call and return it."""
        cost = estimate(model, usage.prompt_tokens, usage.completion_tokens)
        self.spent += cost
        logger.debug("Charged $%.6f to budget (spent $%.6f)", cost, self.spent)
        return cost
