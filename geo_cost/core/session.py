"""
Interactive estimate session.

Owns the mutable inputs of one user session and turns raw view input into
validated engine input. Every call to ``result()`` re-derives the estimate
from the current inputs; nothing is cached.
"""

import math
import re
from typing import Any, Optional, Tuple

from .catalog import DEFAULT_CATALOG, ModelCatalog
from .pricing import CalculationInput, CalculationResult, compute
from .profiles import MONTHLY_PROFILE, EstimatorProfile
from .selection import SelectionController
from .tokens import DEFAULT_TOKEN_ASSUMPTIONS, TokenAssumptions


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(raw: Any) -> Optional[int]:
    """Parse the leading integer of raw view input.

    Trailing text is ignored, so "12.5" gives 12 and "50abc" gives 50.
    Returns None if the input does not start with a number.
    """
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    match = _LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None


class EstimatorSession:
    """Inputs of one estimator form and the selection they drive."""

    def __init__(
        self,
        profile: EstimatorProfile = MONTHLY_PROFILE,
        catalog: ModelCatalog = DEFAULT_CATALOG,
        tokens: TokenAssumptions = DEFAULT_TOKEN_ASSUMPTIONS,
    ):
        self.profile = profile
        self.catalog = catalog
        self.tokens = tokens
        self.prompt_count = profile.default_prompt_count
        self.web_search_percent = profile.default_web_search_percent
        self.frequency = profile.default_frequency
        self.project_count = 1
        self.selection = SelectionController(
            catalog,
            initial=[m for m in profile.default_models if m in catalog],
        )

    def set_prompt_count(self, raw: Any) -> int:
        """Set the prompt count, falling back to 0 for malformed or negative input."""
        value = _parse_int(raw)
        self.prompt_count = max(0, value if value is not None else 0)
        return self.prompt_count

    def set_web_search_percent(self, raw: Any) -> int:
        """Set the web search share, clamped to [0, 100]."""
        value = _parse_int(raw)
        self.web_search_percent = min(100, max(0, value if value is not None else 0))
        return self.web_search_percent

    def set_project_count(self, raw: Any) -> int:
        """Set the project count, falling back to 1 for malformed or non-positive input."""
        value = _parse_int(raw)
        self.project_count = max(1, value if value is not None else 1)
        return self.project_count

    def set_frequency(self, key: str) -> str:
        """Set the refresh cadence.

        Raises:
            UnknownFrequency: If the key is not in the profile's table
        """
        self.frequency = self.profile.frequencies.lookup(key).key
        return self.frequency

    def toggle_model(self, model_id: str) -> Tuple[str, ...]:
        return self.selection.toggle(model_id)

    def build_input(self) -> CalculationInput:
        return CalculationInput(
            prompt_count=self.prompt_count,
            selected_models=self.selection.selected(),
            web_search_percent=self.web_search_percent,
            frequency=self.frequency,
            project_count=self.project_count if self.profile.has_projects else None,
        )

    def result(self) -> CalculationResult:
        """Recompute the estimate from the current inputs."""
        return compute(
            self.build_input(),
            catalog=self.catalog,
            frequencies=self.profile.frequencies,
            tokens=self.tokens,
        )
