"""
Configuration management and loading.

Loads optional overrides of the built-in catalog, frequency tables and
token assumptions from a YAML file.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml

from geo_cost.core.catalog import DEFAULT_CATALOG, ModelCatalog, ModelDefinition, build_catalog
from geo_cost.core.frequency import (
    MONTHLY_FREQUENCIES,
    YEARLY_FREQUENCIES,
    FrequencyDefinition,
    FrequencyTable,
    build_frequency_table,
)
from geo_cost.core.profiles import get_profile, EstimatorProfile
from geo_cost.core.tokens import DEFAULT_TOKEN_ASSUMPTIONS, TokenAssumptions

logger = structlog.get_logger(__name__)

_PRICE_KEYS = (
    'input_price',
    'output_price',
    'pass2_input_price',
    'pass2_output_price',
    'web_search_price',
)
_PERIODS = {'monthly': 'month', 'yearly': 'year'}


@dataclass(frozen=True)
class EstimatorConfig:
    """Catalog, frequency tables and token assumptions in effect."""
    catalog: ModelCatalog = DEFAULT_CATALOG
    tokens: TokenAssumptions = DEFAULT_TOKEN_ASSUMPTIONS
    monthly_frequencies: FrequencyTable = MONTHLY_FREQUENCIES
    yearly_frequencies: FrequencyTable = YEARLY_FREQUENCIES

    def profile(self, name: str) -> EstimatorProfile:
        """Built-in profile bound to the configured frequency table."""
        profile = get_profile(name)
        frequencies = self.yearly_frequencies if profile.period == 'year' else self.monthly_frequencies
        return profile.with_frequencies(frequencies)


DEFAULT_CONFIG = EstimatorConfig()


def load_estimator_config(path: Optional[str] = None) -> EstimatorConfig:
    """Load and validate estimator configuration from a YAML file.

    Every section is optional; a missing section keeps the built-in
    defaults. Unknown keys are rejected so a typo never silently falls
    back to default prices.

    Args:
        path: Path to YAML configuration file, or None for the defaults

    Returns:
        Validated EstimatorConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    if path is None:
        return DEFAULT_CONFIG

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Estimator config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration root must be a dictionary")

    allowed_top_keys = {'tokens', 'models', 'frequencies'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    tokens = DEFAULT_TOKEN_ASSUMPTIONS
    if 'tokens' in raw_config:
        tokens = _parse_tokens(raw_config['tokens'])

    catalog = DEFAULT_CATALOG
    if 'models' in raw_config:
        catalog = _parse_models(raw_config['models'])

    frequencies: Dict[str, FrequencyTable] = {
        'monthly': MONTHLY_FREQUENCIES,
        'yearly': YEARLY_FREQUENCIES,
    }
    if 'frequencies' in raw_config:
        frequencies_data = raw_config['frequencies']
        if not isinstance(frequencies_data, dict):
            raise ValueError("'frequencies' must be a dictionary")
        unknown_periods = set(frequencies_data.keys()) - set(_PERIODS)
        if unknown_periods:
            raise ValueError(f"Unknown frequency tables: {unknown_periods}")
        for name, table_data in frequencies_data.items():
            frequencies[name] = _parse_frequency_table(table_data, name)

    logger.info(
        "config_loaded",
        path=str(config_path),
        models=len(catalog),
        sections=sorted(raw_config.keys()),
    )
    return EstimatorConfig(
        catalog=catalog,
        tokens=tokens,
        monthly_frequencies=frequencies['monthly'],
        yearly_frequencies=frequencies['yearly'],
    )


def _parse_tokens(data: Any) -> TokenAssumptions:
    if not isinstance(data, dict):
        raise ValueError("'tokens' must be a dictionary")

    required = ('pass1_input', 'pass1_output', 'pass2_input', 'pass2_output')
    unknown_keys = set(data.keys()) - set(required)
    if unknown_keys:
        raise ValueError(f"Unknown keys in tokens: {unknown_keys}")

    values = {}
    for key in required:
        if key not in data:
            raise ValueError(f"Missing required '{key}' in tokens")
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"'{key}' in tokens must be a non-negative integer")
        values[key] = value

    return TokenAssumptions(**values)


def _parse_models(data: Any) -> ModelCatalog:
    """Parse the models section.

    The section is a mapping of model identifier to its definition, kept in
    file order. Models with no ``pass2_model`` run their extraction pass on
    themselves, at their own rates. Pass 2 rates left out of an entry are
    those of the model named by ``pass2_model``.
    """
    if not isinstance(data, dict) or not data:
        raise ValueError("'models' must be a non-empty dictionary")

    parsed = [
        (_parse_model(str(model_id), model_data), model_data)
        for model_id, model_data in data.items()
    ]
    by_id = {model.model_id: model for model, _ in parsed}

    models: List[ModelDefinition] = [
        _inherit_pass2_rates(model, model_data, by_id) for model, model_data in parsed
    ]
    return build_catalog(models)


def _inherit_pass2_rates(
    model: ModelDefinition,
    data: Dict[str, Any],
    models: Dict[str, ModelDefinition],
) -> ModelDefinition:
    extraction = models.get(model.pass2_model)
    # Dangling references are rejected when the catalog is built
    if extraction is None or extraction.model_id == model.model_id:
        return model

    rates = {}
    if 'pass2_input_price' not in data:
        rates['pass2_input_price'] = extraction.input_price
    if 'pass2_output_price' not in data:
        rates['pass2_output_price'] = extraction.output_price
    return replace(model, **rates) if rates else model


def _parse_model(model_id: str, data: Any) -> ModelDefinition:
    path = f"models.{model_id}"
    if not isinstance(data, dict):
        raise ValueError(f"Model '{model_id}' must be a dictionary")

    allowed_keys = {'name', 'provider', 'pass2_model', 'search_label', *_PRICE_KEYS}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    for key in ('name', 'provider', 'input_price', 'output_price', 'web_search_price'):
        if key not in data:
            raise ValueError(f"Missing required '{key}' in {path}")

    prices = {}
    for key in _PRICE_KEYS:
        if key not in data:
            continue
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"'{key}' in {path} must be a non-negative number")
        prices[key] = float(value)

    prices.setdefault('pass2_input_price', prices['input_price'])
    prices.setdefault('pass2_output_price', prices['output_price'])

    return ModelDefinition(
        model_id=model_id,
        name=str(data['name']),
        provider=str(data['provider']),
        pass2_model=str(data.get('pass2_model', model_id)),
        search_label=str(data.get('search_label', 'Web Search')),
        **prices,
    )


def _parse_frequency_table(data: Any, name: str) -> FrequencyTable:
    """Parse one frequency table.

    Args:
        data: Mapping of cadence key to ``{label, multiplier}``
        name: Table name ("monthly" or "yearly") for error messages

    Returns:
        Validated FrequencyTable
    """
    if not isinstance(data, dict) or not data:
        raise ValueError(f"'frequencies.{name}' must be a non-empty dictionary")

    definitions: List[FrequencyDefinition] = []
    for key, entry in data.items():
        path = f"frequencies.{name}.{key}"
        if not isinstance(entry, dict):
            raise ValueError(f"'{path}' must be a dictionary")
        unknown_keys = set(entry.keys()) - {'label', 'multiplier'}
        if unknown_keys:
            raise ValueError(f"Unknown keys in {path}: {unknown_keys}")
        if 'multiplier' not in entry:
            raise ValueError(f"Missing required 'multiplier' in {path}")
        multiplier = entry['multiplier']
        if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier <= 0:
            raise ValueError(f"'multiplier' in {path} must be a positive integer")
        definitions.append(FrequencyDefinition(
            key=str(key),
            label=str(entry.get('label', str(key).capitalize())),
            multiplier=multiplier,
        ))

    return build_frequency_table(_PERIODS[name], *definitions)
