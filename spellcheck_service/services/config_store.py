"""
Runtime configuration store with change notifications.

Settings are read once from the environment; the store holds the values that
can change while the service runs (currently the selected dictionaries) and
tells subscribers which key changed.
"""
import copy
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from spellcheck_service.config import Settings
from spellcheck_service.utils.logger import get_logger

logger = get_logger("services.config_store")

SELECTED_DICTS_KEY = "selectedDicts"
UPDATE_EVENT = "update"

ConfigHandler = Callable[[str], None]


class ConfigStore:
    """
    In-memory key/value configuration with ``update`` events.

    Usage:
        store = ConfigStore({SELECTED_DICTS_KEY: ["en_GB"]})
        store.on("update", lambda key: print(f"{key} changed"))
        store.set(SELECTED_DICTS_KEY, ["en_GB", "de_DE"])
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(initial or {})
        self._handlers: Dict[str, List[ConfigHandler]] = defaultdict(list)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfigStore":
        """Seed a store from environment settings."""
        return cls({SELECTED_DICTS_KEY: settings.selected_dicts_list})

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a configuration value.

        Mutable values are copied so callers cannot change the store behind
        its back (which would skip the update notification).
        """
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    def set(self, key: str, value: Any) -> bool:
        """
        Store a configuration value and notify subscribers.

        Args:
            key: Configuration key
            value: New value

        Returns:
            True if the value changed (and ``update`` was emitted), False otherwise
        """
        if key in self._values and self._values[key] == value:
            logger.debug("Config value unchanged", key=key)
            return False

        self._values[key] = copy.deepcopy(value)
        logger.info("Config value updated", key=key, value=value)
        self._emit(UPDATE_EVENT, key)
        return True

    def on(self, event: str, handler: ConfigHandler) -> None:
        """Subscribe ``handler`` to ``event``."""
        self._handlers[event].append(handler)

    def off(self, event: str, handler: ConfigHandler) -> None:
        """Unsubscribe ``handler`` from ``event``; unknown handlers are ignored."""
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def _emit(self, event: str, key: str) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(key)
            except Exception as e:
                logger.error(
                    "Config handler failed",
                    event=event,
                    key=key,
                    error=str(e),
                    exc_info=True,
                )
