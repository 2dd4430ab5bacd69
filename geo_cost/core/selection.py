"""
Model selection with a single model per provider.

Selecting a model replaces any model already selected from the same
provider; selecting it again removes it.
"""

from typing import Dict, Iterable, Optional, Tuple

import structlog

from .catalog import DEFAULT_CATALOG, ModelCatalog

logger = structlog.get_logger(__name__)


class SelectionController:
    """Tracks the selected model of each provider.

    Selection order is preserved: a newly selected model always goes to the
    end, which is the order estimates are reported in.
    """

    def __init__(
        self,
        catalog: ModelCatalog = DEFAULT_CATALOG,
        initial: Optional[Iterable[str]] = None,
    ):
        """Initialize the controller.

        Args:
            catalog: Catalog used to resolve providers
            initial: Model identifiers to toggle on, in order

        Raises:
            UnknownModel: If an initial identifier is not in the catalog
        """
        self.catalog = catalog
        self._by_provider: Dict[str, str] = {}
        for model_id in initial or ():
            if not self.is_selected(model_id):
                self.toggle(model_id)

    def toggle(self, model_id: str) -> Tuple[str, ...]:
        """Select or deselect a model.

        Args:
            model_id: Model identifier

        Returns:
            The selection after the toggle

        Raises:
            UnknownModel: If the model is not in the catalog
        """
        provider = self.catalog.lookup(model_id).provider

        current = self._by_provider.get(provider)
        if current == model_id:
            del self._by_provider[provider]
            logger.debug("model_deselected", model=model_id, provider=provider)
        else:
            # Re-inserting moves the provider to the end of the selection order
            self._by_provider.pop(provider, None)
            self._by_provider[provider] = model_id
            logger.debug("model_selected", model=model_id, provider=provider, replaced=current)

        return self.selected()

    def selected(self) -> Tuple[str, ...]:
        return tuple(self._by_provider.values())

    def selected_for(self, provider: str) -> Optional[str]:
        return self._by_provider.get(provider)

    def is_selected(self, model_id: str) -> bool:
        return model_id in self._by_provider.values()

    def clear(self) -> None:
        self._by_provider.clear()

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._by_provider.values()

    def __len__(self) -> int:
        return len(self._by_provider)
