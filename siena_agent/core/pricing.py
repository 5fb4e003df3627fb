"""
Pricing calculations and rate management.

Estimates Google GenAI request costs with tiered context pricing and
context caching.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Union

from .token_counter import count_tokens

# Gemini pricing tiers split at 128k tokens of context
CONTEXT_TIER_THRESHOLD = 128_000

TOKENS_PER_MILLION = Decimal("1000000")

DEFAULT_PRICING_MODEL = "gemini-3-flash"


@dataclass(frozen=True)
class CostModel:
    """Per-model rates in USD per 1M tokens."""
    input_cost_under_128k: Decimal
    input_cost_over_128k: Decimal
    output_cost_under_128k: Decimal
    output_cost_over_128k: Decimal
    cached_input_cost: Decimal
    storage_cost_per_hour: Decimal  # per 1M cached tokens per hour


@dataclass(frozen=True)
class CostEstimate:
    """Breakdown of a single cost estimate."""
    model_key: str
    input_tokens: int
    output_tokens: int
    cached: bool
    duration_hours: float
    total_usd: float


@dataclass(frozen=True)
class PricingTable:
    """Fixed pricing table with a designated fallback model."""
    prices: Dict[str, CostModel]
    default_model: str = DEFAULT_PRICING_MODEL

    def get_pricing(self, model: str) -> Optional[CostModel]:
        """Get pricing for a model, falling back to the default model.

        Args:
            model: Model identifier

        Returns:
            CostModel for the model, the default model's rates for unknown
            models, or None if the default is missing from the table
        """
        return self.prices.get(model) or self.prices.get(self.default_model)


# Approximate public Gemini pricing
PRICING_TABLE = PricingTable({
    "gemini-3-flash": CostModel(
        input_cost_under_128k=Decimal("0.075"),
        input_cost_over_128k=Decimal("0.15"),
        output_cost_under_128k=Decimal("0.30"),
        output_cost_over_128k=Decimal("0.60"),
        cached_input_cost=Decimal("0.01875"),
        storage_cost_per_hour=Decimal("0.0002"),
    ),
    "gemini-2.5-flash": CostModel(
        input_cost_under_128k=Decimal("1.25"),
        input_cost_over_128k=Decimal("2.50"),
        output_cost_under_128k=Decimal("3.75"),
        output_cost_over_128k=Decimal("7.50"),
        cached_input_cost=Decimal("0.3125"),
        storage_cost_per_hour=Decimal("0.001"),
    ),
})


def calculate_estimate(
    model: str,
    input: Union[str, int],
    output: Union[str, int],
    cached: bool = False,
    duration_hours: float = 0,
    table: PricingTable = PRICING_TABLE,
) -> CostEstimate:
    """Estimate the cost of a GenAI request.

    The tier is selected by input size alone: requests above 128k input
    tokens bill both input and output at the "over" rates. Cached input
    is billed at the cached rate plus hourly storage, output is always
    billed at the tier's standard rate.

    Args:
        model: Model identifier (a ThoughtSpeed value or any string)
        input: Prompt text or input token count
        output: Response text or output token count
        cached: Whether the input is served from the context cache
        duration_hours: Cache storage duration, only used when cached
        table: Pricing table to resolve rates from

    Returns:
        CostEstimate with token counts and total USD
    """
    model_key = str(getattr(model, "value", model))
    input_tokens = count_tokens(input)
    output_tokens = count_tokens(output)

    pricing = table.get_pricing(model_key)
    if pricing is None:
        return CostEstimate(
            model_key=model_key,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cached=cached,
            duration_hours=duration_hours,
            total_usd=0.0,
        )

    is_high_context = input_tokens > CONTEXT_TIER_THRESHOLD
    input_millions = Decimal(input_tokens) / TOKENS_PER_MILLION
    output_millions = Decimal(output_tokens) / TOKENS_PER_MILLION

    if cached:
        input_cost = input_millions * pricing.cached_input_cost
        if duration_hours > 0:
            input_cost += (
                input_millions
                * pricing.storage_cost_per_hour
                * Decimal(str(duration_hours))
            )
    else:
        input_rate = (
            pricing.input_cost_over_128k if is_high_context
            else pricing.input_cost_under_128k
        )
        input_cost = input_millions * input_rate

    output_rate = (
        pricing.output_cost_over_128k if is_high_context
        else pricing.output_cost_under_128k
    )
    output_cost = output_millions * output_rate

    return CostEstimate(
        model_key=model_key,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cached=cached,
        duration_hours=duration_hours,
        total_usd=float(input_cost + output_cost),
    )


def estimate(
    model: str,
    input: Union[str, int],
    output: Union[str, int],
    cached: bool = False,
    duration_hours: float = 0,
) -> float:
    """Estimated cost in USD. See calculate_estimate."""
    return calculate_estimate(model, input, output, cached, duration_hours).total_usd
