"""
Model catalog and per-token rates.

Holds the static table of LLM models the estimator can price. Prices are
expressed in USD per million tokens, web search in USD per 1,000 calls.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple

from .errors import InvalidInput, UnknownModel


@dataclass(frozen=True)
class ModelDefinition:
    """Pricing for a single model and the model its extraction pass runs on.

    The pass2_* rates belong to ``pass2_model``, which may be a cheaper
    model than the one doing the first pass.
    """
    model_id: str
    name: str
    provider: str
    input_price: float  # $ per 1M pass 1 input tokens
    output_price: float  # $ per 1M pass 1 output tokens
    pass2_model: str
    pass2_input_price: float
    pass2_output_price: float
    web_search_price: float  # $ per 1,000 calls
    search_label: str = "Web Search"

    def __post_init__(self):
        """Validate identifiers are set and prices are non-negative."""
        for attr in ("model_id", "name", "provider", "pass2_model"):
            if not getattr(self, attr):
                raise InvalidInput(f"{attr} cannot be empty")
        for attr in (
            "input_price",
            "output_price",
            "pass2_input_price",
            "pass2_output_price",
            "web_search_price",
        ):
            if getattr(self, attr) < 0:
                raise InvalidInput(f"{attr} cannot be negative for {self.model_id}")


@dataclass(frozen=True)
class ModelCatalog:
    """Immutable catalog keyed by model identifier, in declaration order."""
    entries: Mapping[str, ModelDefinition]

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        for model_id, model in self.entries.items():
            if model_id != model.model_id:
                raise InvalidInput(
                    f"Catalog key {model_id!r} does not match model_id {model.model_id!r}"
                )
            if model.pass2_model not in self.entries:
                raise UnknownModel(model.pass2_model)

    def lookup(self, model_id: str) -> ModelDefinition:
        """Get the definition of a model.

        Args:
            model_id: Model identifier

        Returns:
            ModelDefinition for the model

        Raises:
            UnknownModel: If the model is not in the catalog
        """
        if model_id not in self.entries:
            raise UnknownModel(model_id)
        return self.entries[model_id]

    def list_by_provider(self, provider: str) -> Tuple[ModelDefinition, ...]:
        """Models of one provider, in declaration order."""
        return tuple(m for m in self.entries.values() if m.provider == provider)

    def providers(self) -> Tuple[str, ...]:
        """Distinct provider names in order of first declaration."""
        seen: List[str] = []
        for model in self.entries.values():
            if model.provider not in seen:
                seen.append(model.provider)
        return tuple(seen)

    def models(self) -> Iterator[ModelDefinition]:
        return iter(self.entries.values())

    def __contains__(self, model_id: object) -> bool:
        return model_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)


def build_catalog(models: List[ModelDefinition]) -> ModelCatalog:
    """Build a catalog from definitions, rejecting duplicate identifiers."""
    entries: Dict[str, ModelDefinition] = {}
    for model in models:
        if model.model_id in entries:
            raise InvalidInput(f"Duplicate model identifier: {model.model_id}")
        entries[model.model_id] = model
    return ModelCatalog(entries)


_OPENAI = "OpenAI"
_GOOGLE = "Google"
_MISTRAL = "Mistral AI"

# Fixed reference catalog - no dynamic fetching
DEFAULT_CATALOG = build_catalog([
    ModelDefinition(
        model_id="gpt-5-nano",
        name="GPT-5 Nano",
        provider=_OPENAI,
        input_price=0.05,
        output_price=0.40,
        pass2_model="gpt-5-mini",
        pass2_input_price=0.25,
        pass2_output_price=2.00,
        web_search_price=10.00,
    ),
    ModelDefinition(
        model_id="gpt-5-mini",
        name="GPT-5 Mini",
        provider=_OPENAI,
        input_price=0.25,
        output_price=2.00,
        pass2_model="gpt-5-mini",
        pass2_input_price=0.25,
        pass2_output_price=2.00,
        web_search_price=10.00,
    ),
    ModelDefinition(
        model_id="gpt-5.2",
        name="GPT-5.2",
        provider=_OPENAI,
        input_price=1.75,
        output_price=14.00,
        pass2_model="gpt-5-mini",
        pass2_input_price=0.25,
        pass2_output_price=2.00,
        web_search_price=10.00,
    ),
    ModelDefinition(
        model_id="gemini-2.5-flash-lite",
        name="Gemini 2.5 Flash Lite",
        provider=_GOOGLE,
        input_price=0.10,
        output_price=0.40,
        pass2_model="gemini-2.5-flash-lite",
        pass2_input_price=0.10,
        pass2_output_price=0.40,
        web_search_price=35.00,
        search_label="Grounding",
    ),
    ModelDefinition(
        model_id="gemini-3-flash-preview",
        name="Gemini 3 Flash",
        provider=_GOOGLE,
        input_price=0.50,
        output_price=3.00,
        pass2_model="gemini-2.5-flash-lite",
        pass2_input_price=0.10,
        pass2_output_price=0.40,
        web_search_price=35.00,
        search_label="Grounding",
    ),
    ModelDefinition(
        model_id="gemini-3-pro-preview",
        name="Gemini 3 Pro",
        provider=_GOOGLE,
        input_price=2.00,
        output_price=12.00,
        pass2_model="gemini-2.5-flash-lite",
        pass2_input_price=0.10,
        pass2_output_price=0.40,
        web_search_price=35.00,
        search_label="Grounding",
    ),
    ModelDefinition(
        model_id="mistral-small-latest",
        name="Mistral Small",
        provider=_MISTRAL,
        input_price=0.10,
        output_price=0.30,
        pass2_model="mistral-small-latest",
        pass2_input_price=0.10,
        pass2_output_price=0.30,
        web_search_price=30.00,
    ),
    ModelDefinition(
        model_id="mistral-medium-3",
        name="Mistral Medium 3",
        provider=_MISTRAL,
        input_price=0.40,
        output_price=2.00,
        pass2_model="mistral-small-latest",
        pass2_input_price=0.10,
        pass2_output_price=0.30,
        web_search_price=30.00,
    ),
    ModelDefinition(
        model_id="mistral-large-3",
        name="Mistral Large 3",
        provider=_MISTRAL,
        input_price=0.50,
        output_price=1.50,
        pass2_model="mistral-small-latest",
        pass2_input_price=0.10,
        pass2_output_price=0.30,
        web_search_price=30.00,
    ),
])
