"""Capability checks and zero-argument instantiation of providers."""

from __future__ import annotations

import inspect
from typing import Any
from typing import TypeVar
from typing import cast

from .errors import ProviderConstructionError
from .errors import ProviderFaultKind

T = TypeVar("T")


def capability_id(capability: type) -> str:
    """Return the identifier declaration files are named after.

    Example:
        >>> capability_id(collections.abc.Sized)
        'collections.abc.Sized'
    """
    return f"{capability.__module__}.{capability.__qualname__}"


def is_assignable(descriptor: Any, capability: type) -> bool:
    """Check that a resolved descriptor is a class satisfying the capability.

    Pure type-relationship check: nothing is instantiated. Capabilities that
    cannot take part in issubclass (e.g. non runtime-checkable protocols)
    accept nothing.
    """
    if not isinstance(descriptor, type):
        return False
    try:
        return issubclass(descriptor, capability)
    except TypeError:
        return False


def instantiate(descriptor: type, capability: type[T], name: str | None = None) -> T:
    """Construct a provider with no arguments.

    Args:
        descriptor: Validated provider class
        capability: Capability the instance is returned as
        name: Declared name, for error messages (default: the class path)

    Returns:
        New provider instance

    Raises:
        ProviderConstructionError: The class is abstract, needs arguments,
            or its constructor raised
    """
    name = name or capability_id(descriptor)

    if inspect.isabstract(descriptor):
        abstract = ", ".join(sorted(getattr(descriptor, "__abstractmethods__", ())))
        raise ProviderConstructionError(
            name,
            ProviderFaultKind.NOT_INSTANTIABLE,
            f"Provider '{name}' cannot be instantiated: abstract methods {abstract}",
        )

    try:
        signature = inspect.signature(descriptor)
    except (TypeError, ValueError):
        signature = None  # Builtins without introspectable signatures

    if signature is not None:
        try:
            signature.bind()
        except TypeError as e:
            raise ProviderConstructionError(
                name,
                ProviderFaultKind.INACCESSIBLE,
                f"Provider '{name}' has no zero-argument constructor: {e}",
            ) from e

    try:
        instance = descriptor()
    except Exception as e:
        raise ProviderConstructionError(
            name,
            ProviderFaultKind.CONSTRUCTOR_RAISED,
            f"Provider '{name}' raised during construction: {type(e).__name__}: {e}",
        ) from e

    return cast(T, instance)
