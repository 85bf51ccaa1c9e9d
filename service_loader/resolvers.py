"""Name resolver implementations.

A resolver turns a declared provider name into the object it names:
- ImportResolver: imports through the interpreter's import system
- MappingResolver: looks names up in a fixed table
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from .errors import ProviderNotFoundError

if TYPE_CHECKING:
    from .context import LoadingContext

logger = logging.getLogger(__name__)


class NameResolver(Protocol):
    """Resolves a declared name to a loadable descriptor."""

    def resolve(self, name: str, context: LoadingContext | None = None) -> Any:
        """Resolve name to the object it declares.

        Raises:
            ProviderNotFoundError: Name cannot be resolved
        """
        ...


class ImportResolver:
    """Resolves ``package.module.Attr`` or ``package.module:Attr`` names by import.

    Dotted names try the longest importable module prefix first, so
    ``pkg.mod.Outer.Inner`` imports ``pkg.mod`` and walks ``Outer.Inner``.
    Any failure while importing the provider's module (including errors
    raised by its own imports) is reported as ProviderNotFoundError with
    the original exception chained.
    """

    def resolve(self, name: str, context: LoadingContext | None = None) -> Any:
        if ":" in name:
            module_name, _, attr_path = name.partition(":")
            self._check_identifiers(name, module_name.split(".") + attr_path.split("."))
            module = self._import(name, module_name)
            return self._walk(name, module, attr_path.split("."))

        parts = name.split(".")
        self._check_identifiers(name, parts)

        for i in range(len(parts), 0, -1):
            module_name = ".".join(parts[:i])
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as e:
                if e.name is not None and (module_name == e.name or module_name.startswith(f"{e.name}.")):
                    continue
                raise ProviderNotFoundError(name, f"Failed to import '{module_name}' for '{name}': {e}") from e
            except Exception as e:
                raise ProviderNotFoundError(name, f"Failed to import '{module_name}' for '{name}': {e}") from e
            return self._walk(name, module, parts[i:])

        raise ProviderNotFoundError(name, f"No importable module found for '{name}'")

    def _check_identifiers(self, name: str, parts: list[str]) -> None:
        """Reject names that are not a dotted path of identifiers."""
        if not all(part.isidentifier() for part in parts):
            raise ProviderNotFoundError(name, f"Malformed provider name '{name}'")

    def _import(self, name: str, module_name: str) -> Any:
        try:
            return importlib.import_module(module_name)
        except Exception as e:
            raise ProviderNotFoundError(name, f"Failed to import '{module_name}' for '{name}': {e}") from e

    def _walk(self, name: str, obj: Any, attrs: list[str]) -> Any:
        """Follow attribute path from a module."""
        for attr in attrs:
            try:
                obj = getattr(obj, attr)
            except AttributeError as e:
                raise ProviderNotFoundError(name, f"'{name}' not found: no attribute '{attr}'") from e
            except Exception as e:
                raise ProviderNotFoundError(name, f"Failed to look up '{attr}' for '{name}': {e}") from e
        logger.debug(f"[services:resolve] {name} -> {obj!r}")
        return obj

    def __repr__(self) -> str:
        return "ImportResolver()"


class MappingResolver:
    """Resolves names from a fixed table, for registries built in code."""

    def __init__(self, entries: Mapping[str, Any]):
        self.entries = dict(entries)

    def resolve(self, name: str, context: LoadingContext | None = None) -> Any:
        try:
            return self.entries[name]
        except KeyError:
            raise ProviderNotFoundError(name) from None

    def __repr__(self) -> str:
        return f"MappingResolver({len(self.entries)} entries)"
