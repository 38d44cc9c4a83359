"""
Payment Provider Registry

Maps a provider key (the app's directory name) to a lazily loaded
ProviderModule. The set of installed providers is fixed when the registry is
built; afterwards the only mutation is memoizing resolved modules.

Loaders are either a dotted module path, imported on first access and read
through its module-level ``PROVIDER`` attribute, or a zero-argument callable
returning a ProviderModule.
"""

import importlib
import logging
import threading
from typing import Callable, Dict, List, Mapping, Optional, Union

from app.payments.base import ProviderModule
from app.payments.exceptions import ProviderNotFound

logger = logging.getLogger(__name__)

ProviderLoader = Union[str, Callable[[], ProviderModule]]


class ProviderRegistry:
    """
    Read-only registry of installed payment providers.

    Resolution is lazy and memoized. Concurrent first-time resolutions of the
    same key run its loader once; every caller gets the same module object.
    """

    def __init__(self, providers: Mapping[str, ProviderLoader]):
        """
        Args:
            providers: Mapping of provider key to loader
        """
        self._loaders: Dict[str, ProviderLoader] = dict(providers)
        self._modules: Dict[str, ProviderModule] = {}
        self._key_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        logger.info(f"ProviderRegistry initialized with {len(self._loaders)} provider(s)")

    def resolve(self, key: str) -> ProviderModule:
        """
        Get the provider module for a key, loading it on first access.

        Args:
            key: Provider key (e.g. "stripe")

        Returns:
            The memoized ProviderModule

        Raises:
            ProviderNotFound: If the key is not installed
            TypeError: If the loader does not produce a ProviderModule
        """
        module = self._modules.get(key)
        if module is not None:
            return module

        if key not in self._loaders:
            raise ProviderNotFound(key)

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            module = self._modules.get(key)
            if module is None:
                module = self._load(key)
                self._modules[key] = module
                logger.info(f"Loaded payment provider: {module.name} (key={key})")

        return module

    def _load(self, key: str) -> ProviderModule:
        loader = self._loaders[key]

        if isinstance(loader, str):
            module = getattr(importlib.import_module(loader), "PROVIDER", None)
        else:
            module = loader()

        if not isinstance(module, ProviderModule):
            raise TypeError(
                f"Loader for provider '{key}' returned {type(module).__name__}, "
                f"expected ProviderModule"
            )
        return module

    def preload(self) -> List[str]:
        """
        Resolve every installed provider up front.

        Loading imports provider modules synchronously; run this at startup
        (off the event loop) so request handlers only hit the memoized cache.
        A provider that fails to load is logged and retried on first use.

        Returns:
            Keys that were loaded successfully
        """
        loaded = []
        for key in self.keys():
            try:
                self.resolve(key)
            except Exception as e:
                logger.warning(f"Payment provider '{key}' failed to preload: {e}")
                continue
            loaded.append(key)
        return loaded

    def is_resolved(self, key: str) -> bool:
        return key in self._modules

    def keys(self) -> List[str]:
        """List installed provider keys."""
        return list(self._loaders.keys())

    def __len__(self) -> int:
        return len(self._loaders)

    def __contains__(self, key: object) -> bool:
        return key in self._loaders

    def __repr__(self) -> str:
        return f"<ProviderRegistry providers={len(self._loaders)} resolved={len(self._modules)}>"


_registry: Optional[ProviderRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> ProviderRegistry:
    """
    Get the process-wide registry, built once from APP_STORE.

    Returns:
        ProviderRegistry singleton
    """
    global _registry

    if _registry is None:
        with _registry_lock:
            if _registry is None:
                from app.payments.providers import APP_STORE
                _registry = ProviderRegistry(APP_STORE)

    return _registry


def reset_registry() -> None:
    """
    Drop the process-wide registry so the next get_registry() rebuilds it.

    Warning: This is mainly for testing.
    """
    global _registry
    with _registry_lock:
        _registry = None
