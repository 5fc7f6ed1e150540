"""Static knowledge base mapping actions and device kinds to channels."""

import logging
from collections.abc import Mapping

from colloquy.config.models import ActionConfig, ColloquyConfig
from colloquy.core.commands import ActionTarget

logger = logging.getLogger(__name__)


class ActionCatalog:
    """Read-only lookup of ``(action, device atom) -> ActionTarget``.

    Usage:
        catalog = ActionCatalog.default()
        target = catalog.lookup("tt:device.action.post", "tt:device.twitter")
    """

    def __init__(self, actions: Mapping[str, ActionConfig]):
        self._actions: dict[str, ActionConfig] = dict(actions)

    @classmethod
    def from_config(cls, config: ColloquyConfig) -> "ActionCatalog":
        catalog = cls(config.actions)
        logger.debug(f"Loaded action catalog with {len(catalog)} actions")
        return catalog

    @classmethod
    def default(cls) -> "ActionCatalog":
        """Catalog bundled with the package configuration."""
        from colloquy.config.loader import ConfigLoader

        return cls.from_config(ConfigLoader.load_default())

    def has_action(self, action: str) -> bool:
        return action in self._actions

    def lookup(self, action: str, device: str) -> ActionTarget | None:
        """Exact device entry for an action, or None."""
        entry = self._actions.get(action)
        if entry is None:
            return None
        return entry.devices.get(device)

    def fallback(self, action: str) -> list[ActionTarget]:
        """Targets to try, in order, when no exact device matches."""
        entry = self._actions.get(action)
        if entry is None:
            return []
        return [entry.devices[name] for name in entry.fallback]

    def actions(self) -> list[str]:
        return sorted(self._actions)

    def __contains__(self, action: str) -> bool:
        return action in self._actions

    def __len__(self) -> int:
        return len(self._actions)
