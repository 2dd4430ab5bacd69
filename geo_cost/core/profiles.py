"""
Estimator profiles.

The estimator ships in two configurations of the same engine: a monthly
one, and a yearly one that adds a project-count dimension.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import InvalidInput
from .frequency import MONTHLY_FREQUENCIES, YEARLY_FREQUENCIES, FrequencyTable


@dataclass(frozen=True)
class EstimatorProfile:
    """Frequency basis, presets and defaults for one estimator variant.

    ``project_presets`` is None when the variant has no project dimension.
    """
    name: str
    frequencies: FrequencyTable
    prompt_presets: Tuple[int, ...]
    project_presets: Optional[Tuple[int, ...]] = None
    default_prompt_count: int = 100
    default_frequency: str = "weekly"
    default_models: Tuple[str, ...] = ("gpt-5-nano",)
    default_web_search_percent: int = 100

    def __post_init__(self):
        """Validate defaults against the frequency table."""
        if self.default_frequency not in self.frequencies:
            raise InvalidInput(
                f"default_frequency {self.default_frequency!r} not in {self.name} frequencies"
            )
        if any(p < 0 for p in self.prompt_presets):
            raise InvalidInput("prompt presets cannot be negative")
        if self.project_presets is not None and any(p < 1 for p in self.project_presets):
            raise InvalidInput("project presets must be >= 1")

    @property
    def has_projects(self) -> bool:
        return self.project_presets is not None

    @property
    def period(self) -> str:
        return self.frequencies.period

    def with_frequencies(self, frequencies: FrequencyTable) -> "EstimatorProfile":
        """Copy of this profile bound to another frequency table.

        If the table has no entry for the default cadence, its first
        cadence becomes the default.
        """
        default_frequency = self.default_frequency
        if default_frequency not in frequencies:
            default_frequency = frequencies.keys()[0]
        return EstimatorProfile(
            name=self.name,
            frequencies=frequencies,
            prompt_presets=self.prompt_presets,
            project_presets=self.project_presets,
            default_prompt_count=self.default_prompt_count,
            default_frequency=default_frequency,
            default_models=self.default_models,
            default_web_search_percent=self.default_web_search_percent,
        )


MONTHLY_PROFILE = EstimatorProfile(
    name="monthly",
    frequencies=MONTHLY_FREQUENCIES,
    prompt_presets=(100, 500, 1000, 5000),
)

YEARLY_PROFILE = EstimatorProfile(
    name="yearly",
    frequencies=YEARLY_FREQUENCIES,
    prompt_presets=(50, 100, 500, 750, 1000, 5000),
    project_presets=(1, 3, 5, 10),
)

PROFILES: Dict[str, EstimatorProfile] = {
    MONTHLY_PROFILE.name: MONTHLY_PROFILE,
    YEARLY_PROFILE.name: YEARLY_PROFILE,
}


def get_profile(name: str) -> EstimatorProfile:
    """Get a built-in profile by name.

    Raises:
        InvalidInput: If the profile does not exist
    """
    try:
        return PROFILES[name]
    except KeyError:
        raise InvalidInput(f"Unknown profile: {name} (expected one of {sorted(PROFILES)})")
