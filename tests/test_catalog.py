"""
Unit tests for the model catalog and frequency tables.
"""

import pytest

from geo_cost.core.catalog import DEFAULT_CATALOG, ModelCatalog, ModelDefinition, build_catalog
from geo_cost.core.errors import InvalidInput, UnknownFrequency, UnknownModel
from geo_cost.core.frequency import (
    MONTHLY_FREQUENCIES,
    YEARLY_FREQUENCIES,
    FrequencyDefinition,
    build_frequency_table,
)
from geo_cost.core.tokens import DEFAULT_TOKEN_ASSUMPTIONS, TokenAssumptions


def _model(model_id, provider="Acme", pass2_model=None, **overrides):
    values = dict(
        model_id=model_id,
        name=model_id.title(),
        provider=provider,
        input_price=1.0,
        output_price=2.0,
        pass2_model=pass2_model or model_id,
        pass2_input_price=1.0,
        pass2_output_price=2.0,
        web_search_price=5.0,
    )
    values.update(overrides)
    return ModelDefinition(**values)


class TestModelDefinition:
    """Test model definition validation."""

    def test_negative_price_rejected(self):
        """Verify prices cannot be negative."""
        with pytest.raises(InvalidInput, match="input_price cannot be negative"):
            _model("alpha", input_price=-0.01)

    def test_empty_provider_rejected(self):
        """Verify provider is required."""
        with pytest.raises(InvalidInput, match="provider cannot be empty"):
            _model("alpha", provider="")

    def test_default_search_label(self):
        """Verify web search is the default search label."""
        assert _model("alpha").search_label == "Web Search"


class TestModelCatalog:
    """Test catalog lookups."""

    def test_lookup(self):
        """Verify pricing retrieval for a catalog model."""
        nano = DEFAULT_CATALOG.lookup("gpt-5-nano")
        assert nano.provider == "OpenAI"
        assert nano.input_price == 0.05
        assert nano.output_price == 0.40
        assert nano.pass2_model == "gpt-5-mini"
        assert nano.pass2_input_price == 0.25
        assert nano.pass2_output_price == 2.00
        assert nano.web_search_price == 10.00

    def test_unknown_model_raises_error(self):
        """Verify error for unknown models."""
        with pytest.raises(UnknownModel, match="Unknown model: unknown-model") as exc_info:
            DEFAULT_CATALOG.lookup("unknown-model")
        assert exc_info.value.model_id == "unknown-model"

    def test_providers_in_declaration_order(self):
        """Verify the reference catalog has three providers."""
        assert DEFAULT_CATALOG.providers() == ("OpenAI", "Google", "Mistral AI")

    def test_list_by_provider_keeps_order(self):
        """Verify models of a provider come back in declaration order."""
        google = [m.model_id for m in DEFAULT_CATALOG.list_by_provider("Google")]
        assert google == ["gemini-2.5-flash-lite", "gemini-3-flash-preview", "gemini-3-pro-preview"]

    def test_list_by_unknown_provider_is_empty(self):
        """Verify an unknown provider has no models."""
        assert DEFAULT_CATALOG.list_by_provider("Nobody") == ()

    def test_grounding_label_for_google(self):
        """Verify Google models bill grounding rather than web search."""
        for model in DEFAULT_CATALOG.list_by_provider("Google"):
            assert model.search_label == "Grounding"
            assert model.web_search_price == 35.00

    def test_every_pass2_model_is_in_catalog(self):
        """Verify extraction models resolve within the catalog."""
        for model in DEFAULT_CATALOG.models():
            assert model.pass2_model in DEFAULT_CATALOG

    def test_supports_more_providers(self):
        """Verify the catalog is not limited to three providers."""
        catalog = build_catalog([_model(f"m{i}", provider=f"P{i}") for i in range(5)])
        assert len(catalog.providers()) == 5
        assert len(catalog) == 5

    def test_missing_pass2_model_rejected(self):
        """Verify a catalog cannot reference an absent extraction model."""
        with pytest.raises(UnknownModel, match="ghost"):
            build_catalog([_model("alpha", pass2_model="ghost")])

    def test_duplicate_identifier_rejected(self):
        """Verify duplicate identifiers are refused."""
        with pytest.raises(InvalidInput, match="Duplicate model identifier"):
            build_catalog([_model("alpha"), _model("alpha")])

    def test_mismatched_key_rejected(self):
        """Verify catalog keys must match the model identifier."""
        with pytest.raises(InvalidInput, match="does not match"):
            ModelCatalog({"beta": _model("alpha")})

    def test_entries_are_read_only(self):
        """Verify the catalog cannot be changed after construction."""
        with pytest.raises(TypeError):
            DEFAULT_CATALOG.entries["rogue"] = _model("rogue")
        assert "rogue" not in DEFAULT_CATALOG

    def test_source_dict_changes_do_not_leak(self):
        """Verify later edits to the source mapping leave the catalog alone."""
        source = {"alpha": _model("alpha")}
        catalog = ModelCatalog(source)
        source["beta"] = _model("beta")
        assert len(catalog) == 1


class TestFrequencyTable:
    """Test frequency lookups and multiplier bases."""

    def test_monthly_multipliers(self):
        """Verify runs per month for each cadence."""
        assert MONTHLY_FREQUENCIES.lookup("daily").multiplier == 30
        assert MONTHLY_FREQUENCIES.lookup("weekly").multiplier == 4
        assert MONTHLY_FREQUENCIES.lookup("monthly").multiplier == 1
        assert MONTHLY_FREQUENCIES.period == "month"

    def test_yearly_multipliers(self):
        """Verify runs per year for each cadence."""
        assert YEARLY_FREQUENCIES.lookup("daily").multiplier == 365
        assert YEARLY_FREQUENCIES.lookup("weekly").multiplier == 52
        assert YEARLY_FREQUENCIES.lookup("monthly").multiplier == 12
        assert YEARLY_FREQUENCIES.period == "year"

    def test_keys_in_declaration_order(self):
        """Verify keys are listed in declaration order."""
        assert MONTHLY_FREQUENCIES.keys() == ("daily", "weekly", "monthly")

    def test_unknown_frequency_raises_error(self):
        """Verify error for unknown cadences."""
        with pytest.raises(UnknownFrequency, match="Unknown frequency: hourly") as exc_info:
            MONTHLY_FREQUENCIES.lookup("hourly")
        assert exc_info.value.key == "hourly"

    @pytest.mark.parametrize("multiplier", [0, -4])
    def test_non_positive_multiplier_rejected(self, multiplier):
        """Verify multipliers must be positive."""
        with pytest.raises(InvalidInput, match="must be > 0"):
            FrequencyDefinition(key="never", label="Never", multiplier=multiplier)

    def test_empty_table_rejected(self):
        """Verify a table needs at least one cadence."""
        with pytest.raises(InvalidInput, match="cannot be empty"):
            build_frequency_table("month")

    def test_entries_are_read_only(self):
        """Verify cadences cannot be added to a built table."""
        with pytest.raises(TypeError):
            MONTHLY_FREQUENCIES.entries["hourly"] = FrequencyDefinition(
                key="hourly", label="Hourly", multiplier=720
            )
        assert "hourly" not in MONTHLY_FREQUENCIES


class TestTokenAssumptions:
    """Test token assumption constants."""

    def test_defaults(self):
        """Verify default token counts per phase."""
        assert DEFAULT_TOKEN_ASSUMPTIONS == TokenAssumptions(50, 500, 600, 100)
        assert DEFAULT_TOKEN_ASSUMPTIONS.pass1_total == 550
        assert DEFAULT_TOKEN_ASSUMPTIONS.pass2_total == 700

    def test_negative_tokens_rejected(self):
        """Verify token counts cannot be negative."""
        with pytest.raises(InvalidInput, match="pass2_output cannot be negative"):
            TokenAssumptions(pass1_input=50, pass1_output=500, pass2_input=600, pass2_output=-1)
