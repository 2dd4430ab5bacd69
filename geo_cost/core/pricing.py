"""
Pricing calculations for the two-pass GEO pipeline.

Computes the projected spend of every selected model from a prompt volume,
a web-search ratio and a refresh cadence. This is a pure re-derivation:
results are rebuilt from scratch on every call and never rounded.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import structlog

from .catalog import DEFAULT_CATALOG, ModelCatalog, ModelDefinition
from .errors import InvalidInput
from .frequency import MONTHLY_FREQUENCIES, FrequencyDefinition, FrequencyTable
from .tokens import DEFAULT_TOKEN_ASSUMPTIONS, TokenAssumptions

logger = structlog.get_logger(__name__)

TOKENS_PER_PRICE_UNIT = 1_000_000
CALLS_PER_SEARCH_UNIT = 1_000


@dataclass(frozen=True)
class CalculationInput:
    """Inputs of one estimate.

    ``project_count`` is None when the project dimension is not in use;
    the engine then scales by a single project.
    """
    prompt_count: int
    selected_models: Tuple[str, ...]
    web_search_percent: float
    frequency: str
    project_count: Optional[int] = None

    def __post_init__(self):
        """Validate numeric ranges."""
        if isinstance(self.prompt_count, bool) or not isinstance(self.prompt_count, int):
            raise InvalidInput("prompt_count must be an integer")
        if self.prompt_count < 0:
            raise InvalidInput("prompt_count cannot be negative")
        if not 0 <= self.web_search_percent <= 100:
            raise InvalidInput("web_search_percent must be between 0 and 100")
        if self.project_count is not None:
            if isinstance(self.project_count, bool) or not isinstance(self.project_count, int):
                raise InvalidInput("project_count must be an integer")
            if self.project_count < 1:
                raise InvalidInput("project_count must be >= 1")
        if len(set(self.selected_models)) != len(self.selected_models):
            raise InvalidInput("selected_models contains duplicates")

    @property
    def effective_project_count(self) -> int:
        return 1 if self.project_count is None else self.project_count


@dataclass(frozen=True)
class ModelCost:
    """Cost breakdown of one model for one run and one period."""
    model: ModelDefinition
    pass1_input_cost: float
    pass1_output_cost: float
    pass2_input_cost: float
    pass2_output_cost: float
    web_search_calls: float
    web_search_cost: float
    total_per_period: float

    @property
    def model_id(self) -> str:
        return self.model.model_id

    @property
    def pass1_cost(self) -> float:
        return self.pass1_input_cost + self.pass1_output_cost

    @property
    def pass2_cost(self) -> float:
        return self.pass2_input_cost + self.pass2_output_cost

    @property
    def total_per_run(self) -> float:
        return self.pass1_cost + self.pass2_cost + self.web_search_cost


@dataclass(frozen=True)
class CalculationResult:
    """Per-model costs plus aggregates across all selected models.

    ``total_per_run`` is for a single project; ``grand_total_per_run``
    multiplies it by the project count. ``total_per_period`` is the grand
    total for the accounting period across every project.
    """
    models: Tuple[ModelCost, ...]
    frequency: FrequencyDefinition
    project_count: int
    total_per_run: float
    total_per_period: float

    @property
    def per_project_per_period(self) -> float:
        return self.total_per_run * self.frequency.multiplier

    @property
    def grand_total_per_run(self) -> float:
        return self.total_per_run * self.project_count


def _token_cost(prompt_count: int, tokens: int, price_per_million: float) -> float:
    return (prompt_count * tokens / TOKENS_PER_PRICE_UNIT) * price_per_million


def calculate_model_cost(
    model: ModelDefinition,
    prompt_count: int,
    web_search_percent: float,
    runs_per_period: int,
    project_count: int = 1,
    tokens: TokenAssumptions = DEFAULT_TOKEN_ASSUMPTIONS,
) -> ModelCost:
    """Calculate the cost of running every prompt through one model.

    Pass 2 is always priced on the model's pass2_* rates, which may belong
    to a cheaper extraction model. Web search is billed per 1,000 calls and
    the number of calls is left fractional.

    Args:
        model: Model to price
        prompt_count: Prompts per run
        web_search_percent: Share of prompts using web search (0-100)
        runs_per_period: Frequency multiplier for the accounting period
        project_count: Number of projects sharing the same setup
        tokens: Average token counts per phase

    Returns:
        ModelCost with unrounded values
    """
    pass1_input_cost = _token_cost(prompt_count, tokens.pass1_input, model.input_price)
    pass1_output_cost = _token_cost(prompt_count, tokens.pass1_output, model.output_price)
    pass2_input_cost = _token_cost(prompt_count, tokens.pass2_input, model.pass2_input_price)
    pass2_output_cost = _token_cost(prompt_count, tokens.pass2_output, model.pass2_output_price)

    web_search_calls = prompt_count * web_search_percent / 100
    web_search_cost = (web_search_calls / CALLS_PER_SEARCH_UNIT) * model.web_search_price

    pass1_cost = pass1_input_cost + pass1_output_cost
    pass2_cost = pass2_input_cost + pass2_output_cost
    total_per_run = pass1_cost + pass2_cost + web_search_cost

    return ModelCost(
        model=model,
        pass1_input_cost=pass1_input_cost,
        pass1_output_cost=pass1_output_cost,
        pass2_input_cost=pass2_input_cost,
        pass2_output_cost=pass2_output_cost,
        web_search_calls=web_search_calls,
        web_search_cost=web_search_cost,
        total_per_period=total_per_run * runs_per_period * project_count,
    )


def compute(
    calculation_input: CalculationInput,
    catalog: ModelCatalog = DEFAULT_CATALOG,
    frequencies: FrequencyTable = MONTHLY_FREQUENCIES,
    tokens: TokenAssumptions = DEFAULT_TOKEN_ASSUMPTIONS,
) -> CalculationResult:
    """Compute the cost breakdown of every selected model.

    Args:
        calculation_input: Validated estimate inputs
        catalog: Catalog to resolve model identifiers against
        frequencies: Frequency table of the accounting period
        tokens: Average token counts per phase

    Returns:
        CalculationResult with models in selection order

    Raises:
        UnknownModel: If a selected model is not in the catalog
        UnknownFrequency: If the frequency key is not in the table
        InvalidInput: If two selected models share a provider
    """
    frequency = frequencies.lookup(calculation_input.frequency)
    project_count = calculation_input.effective_project_count

    models = [catalog.lookup(model_id) for model_id in calculation_input.selected_models]
    providers = [m.provider for m in models]
    if len(set(providers)) != len(providers):
        raise InvalidInput("At most one model per provider can be selected")

    costs = tuple(
        calculate_model_cost(
            model,
            prompt_count=calculation_input.prompt_count,
            web_search_percent=calculation_input.web_search_percent,
            runs_per_period=frequency.multiplier,
            project_count=project_count,
            tokens=tokens,
        )
        for model in models
    )

    result = CalculationResult(
        models=costs,
        frequency=frequency,
        project_count=project_count,
        total_per_run=sum((c.total_per_run for c in costs), 0.0),
        total_per_period=sum((c.total_per_period for c in costs), 0.0),
    )
    logger.debug(
        "estimate_computed",
        models=[c.model_id for c in costs],
        prompt_count=calculation_input.prompt_count,
        frequency=frequency.key,
        project_count=project_count,
        total_per_period=result.total_per_period,
    )
    return result
