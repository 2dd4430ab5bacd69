"""
Refresh cadences and their run multipliers.

A multiplier is the number of runs per accounting period. The monthly and
yearly variants of the estimator use different bases for the same keys.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple

from .errors import InvalidInput, UnknownFrequency


@dataclass(frozen=True)
class FrequencyDefinition:
    """A refresh cadence and how many runs it implies per period."""
    key: str
    label: str
    multiplier: int

    def __post_init__(self):
        """Validate multiplier is a positive integer."""
        if isinstance(self.multiplier, bool) or not isinstance(self.multiplier, int):
            raise InvalidInput(f"multiplier for {self.key} must be an integer")
        if self.multiplier <= 0:
            raise InvalidInput(f"multiplier for {self.key} must be > 0")


@dataclass(frozen=True)
class FrequencyTable:
    """Read-only mapping of cadence key to definition."""
    period: str  # accounting period, e.g. "month" or "year"
    entries: Mapping[str, FrequencyDefinition]

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        if not self.entries:
            raise InvalidInput("Frequency table cannot be empty")
        for key, definition in self.entries.items():
            if key != definition.key:
                raise InvalidInput(f"Frequency key {key!r} does not match {definition.key!r}")

    def lookup(self, key: str) -> FrequencyDefinition:
        """Get a cadence by key.

        Raises:
            UnknownFrequency: If the key is not in the table
        """
        if key not in self.entries:
            raise UnknownFrequency(key)
        return self.entries[key]

    def keys(self) -> Tuple[str, ...]:
        return tuple(self.entries)

    def __iter__(self) -> Iterator[FrequencyDefinition]:
        return iter(self.entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self.entries


def build_frequency_table(period: str, *definitions: FrequencyDefinition) -> FrequencyTable:
    return FrequencyTable(period=period, entries={d.key: d for d in definitions})


MONTHLY_FREQUENCIES = build_frequency_table(
    "month",
    FrequencyDefinition(key="daily", label="Daily", multiplier=30),
    FrequencyDefinition(key="weekly", label="Weekly", multiplier=4),
    FrequencyDefinition(key="monthly", label="Monthly", multiplier=1),
)

YEARLY_FREQUENCIES = build_frequency_table(
    "year",
    FrequencyDefinition(key="daily", label="Daily", multiplier=365),
    FrequencyDefinition(key="weekly", label="Weekly", multiplier=52),
    FrequencyDefinition(key="monthly", label="Monthly", multiplier=12),
)
