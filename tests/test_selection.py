"""
Unit tests for the selection controller.

Tests toggle semantics and the one-model-per-provider invariant.
"""

import random

import pytest

from geo_cost.core.catalog import DEFAULT_CATALOG
from geo_cost.core.errors import UnknownModel
from geo_cost.core.selection import SelectionController


def _providers(controller):
    return [DEFAULT_CATALOG.lookup(m).provider for m in controller.selected()]


class TestToggle:
    """Test toggle behavior."""

    def test_select_unrepresented_provider_adds(self):
        """Verify selecting a model of a new provider grows the selection."""
        controller = SelectionController(initial=["gpt-5-nano"])
        controller.toggle("gemini-3-flash-preview")
        assert controller.selected() == ("gpt-5-nano", "gemini-3-flash-preview")
        assert len(controller) == 2

    def test_toggle_selected_removes(self):
        """Verify toggling a selected model deselects it."""
        controller = SelectionController(initial=["gpt-5-nano", "mistral-small-latest"])
        controller.toggle("gpt-5-nano")
        assert controller.selected() == ("mistral-small-latest",)
        assert "gpt-5-nano" not in controller

    def test_toggle_last_model_empties_selection(self):
        """Verify a selection can become empty."""
        controller = SelectionController(initial=["gpt-5-nano"])
        assert controller.toggle("gpt-5-nano") == ()
        assert len(controller) == 0

    def test_same_provider_replaces(self):
        """Verify selecting another model of a provider replaces it."""
        controller = SelectionController(initial=["gpt-5-nano", "gemini-2.5-flash-lite"])
        controller.toggle("gpt-5.2")
        assert "gpt-5-nano" not in controller
        assert controller.is_selected("gpt-5.2")
        assert len(controller) == 2
        # Replacement moves the provider to the end
        assert controller.selected() == ("gemini-2.5-flash-lite", "gpt-5.2")

    def test_double_toggle_restores_membership(self):
        """Verify toggling twice returns the id to its original state."""
        controller = SelectionController(initial=["mistral-large-3"])
        controller.toggle("gemini-3-pro-preview")
        controller.toggle("gemini-3-pro-preview")
        assert controller.selected() == ("mistral-large-3",)

    def test_unknown_model_raises_and_keeps_state(self):
        """Verify unknown identifiers fail without touching the selection."""
        controller = SelectionController(initial=["gpt-5-nano"])
        with pytest.raises(UnknownModel):
            controller.toggle("claude-3-opus")
        assert controller.selected() == ("gpt-5-nano",)

    def test_selected_for_provider(self):
        """Verify per-provider lookup of the current selection."""
        controller = SelectionController(initial=["mistral-medium-3"])
        assert controller.selected_for("Mistral AI") == "mistral-medium-3"
        assert controller.selected_for("OpenAI") is None

    def test_initial_selection_respects_invariant(self):
        """Verify the constructor keeps one model per provider."""
        controller = SelectionController(initial=["gpt-5-nano", "gpt-5-mini", "gpt-5-mini"])
        assert controller.selected() == ("gpt-5-mini",)

    def test_clear(self):
        """Verify clear empties the selection."""
        controller = SelectionController(initial=["gpt-5-nano", "gemini-3-pro-preview"])
        controller.clear()
        assert controller.selected() == ()


class TestInvariant:
    """Test the invariant over arbitrary toggle sequences."""

    @pytest.mark.parametrize("seed", range(10))
    def test_random_sequences_keep_one_model_per_provider(self, seed):
        """Verify no two selected models ever share a provider."""
        rng = random.Random(seed)
        model_ids = list(DEFAULT_CATALOG.entries)
        controller = SelectionController()

        for _ in range(200):
            model_id = rng.choice(model_ids)
            before = set(controller.selected())
            provider = DEFAULT_CATALOG.lookup(model_id).provider
            represented = controller.selected_for(provider) is not None

            controller.toggle(model_id)
            after = set(controller.selected())

            providers = _providers(controller)
            assert len(providers) == len(set(providers))

            if model_id in before:
                assert len(after) == len(before) - 1
                assert model_id not in after
            elif represented:
                assert len(after) == len(before)
                assert model_id in after
            else:
                assert len(after) == len(before) + 1
                assert model_id in after
