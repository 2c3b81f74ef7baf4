"""
Module Registry - One rules module per game-type key.

Modules are registered once at startup. A malformed or duplicate
registration raises immediately; there is no recovery path.
"""

from __future__ import annotations
import logging
from typing import Iterator

from ..errors import DuplicateKey, MissingKey, MissingRoles, UnknownGameType
from .base import RulesModule, ModuleSummary

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """
    Typed registry keyed by game-type string.

    Usage:
        registry = ModuleRegistry()
        registry.register(ChessModule())

        module = registry.require("chess")
    """

    def __init__(self, modules: list[RulesModule] | None = None):
        self._modules: dict[str, RulesModule] = {}
        for module in modules or []:
            self.register(module)

    def register(self, module: RulesModule):
        """
        Register a module.

        Raises:
            MissingKey: module has no key
            MissingRoles: module declares no roles
            DuplicateKey: key already taken
        """
        key = getattr(module, "key", None)
        if not module or not key:
            raise MissingKey()
        if not getattr(module, "roles", None):
            raise MissingRoles(key)
        if key in self._modules:
            raise DuplicateKey(key)

        self._modules[key] = module
        logger.info("Registered game module %s (%s v%s)", key, module.name, module.version)

    def get(self, key: str) -> RulesModule | None:
        return self._modules.get(key)

    def require(self, key: str) -> RulesModule:
        """Like get(), but raises UnknownGameType on a miss."""
        module = self._modules.get(key)
        if module is None:
            raise UnknownGameType(key)
        return module

    def list(self) -> list[ModuleSummary]:
        return [module.summary() for module in self._modules.values()]

    def keys(self) -> list[str]:
        return list(self._modules)

    def __contains__(self, key: object) -> bool:
        return key in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[RulesModule]:
        return iter(self._modules.values())
