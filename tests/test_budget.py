"""
Unit tests for the budget guard.

Tests enforcement order and breach actions.
"""

import logging

import pytest

from siena_agent.core.budget import (
    BreachAction,
    BudgetConfig,
    BudgetExceeded,
    BudgetGuard,
)
from siena_agent.core.token_counter import TokenUsage


class TestBudgetConfig:

    def test_rejects_non_positive_limits(self):
        with pytest.raises(ValueError, match="max_cost_per_call"):
            BudgetConfig(max_cost_per_call=0)
        with pytest.raises(ValueError, match="budget_limit"):
            BudgetConfig(budget_limit=-1)


class TestBudgetGuard:
    """Test limit checks and spend tracking."""

    def test_within_limits(self):
        guard = BudgetGuard(BudgetConfig(max_cost_per_call=1.0, budget_limit=10.0))
        assert guard.check("gemini-3-flash", "short prompt") is None

    def test_max_cost_per_call_blocks(self):
        guard = BudgetGuard(BudgetConfig(max_cost_per_call=0.000001))
        with pytest.raises(BudgetExceeded, match="exceeds maximum allowed") as exc_info:
            guard.check("gemini-3-flash", "x" * 400_000)
        assert exc_info.value.action == BreachAction.BLOCK

    def test_max_cost_per_call_warns(self, caplog):
        guard = BudgetGuard(BudgetConfig(max_cost_per_call=0.000001, on_breach=BreachAction.WARN))
        with caplog.at_level(logging.WARNING):
            assert guard.check("gemini-3-flash", "x" * 400_000) == BreachAction.WARN
        assert "exceeds maximum allowed" in caplog.text

    def test_budget_limit_blocks_once_spent(self):
        guard = BudgetGuard(BudgetConfig(budget_limit=0.0001))
        guard.charge("gemini-3-flash", TokenUsage(prompt_tokens=1_000_000, completion_tokens=0))

        assert guard.remaining < 0
        with pytest.raises(BudgetExceeded, match="Budget limit"):
            guard.check("gemini-3-flash", "hi")

    def test_charge_accumulates(self):
        guard = BudgetGuard(BudgetConfig(budget_limit=10.0))
        first = guard.charge("gemini-3-flash", TokenUsage(1000, 100))
        guard.charge("gemini-3-flash", TokenUsage(1000, 100))

        assert first == pytest.approx(0.000105)
        assert guard.spent == pytest.approx(0.00021)
        assert guard.remaining == pytest.approx(10.0 - 0.00021)

    def test_no_limit_means_no_remaining(self):
        assert BudgetGuard(BudgetConfig()).remaining is None
