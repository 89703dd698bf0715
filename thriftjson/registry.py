"""Name lookups for pluggable classes, filled by importing their package."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from . import errors, logs
from .utils.format import format_exc
from .utils.path import import_class, import_package

log = logs.get(__name__)

_registries: list[Registry[Any]] = []


def init() -> None:
    """Load every registry that has not been loaded yet."""
    for registry in _registries:
        registry.load()


T = TypeVar('T')


class Registry(Generic[T]):
    """Maps names to the subclasses of `base_type` defined in `package`.

    Classes register themselves when their module is imported; `load`
    imports every module of the package once. Names that are not registered
    are tried as a dotted `module.Class` path.
    """

    def __init__(self, package: str, base_type: type[T]) -> None:
        self._package = package
        self._base_type = base_type
        self._classes: dict[str, type[T]] = {}
        self._loaded = False

        _registries.append(self)

    def __getitem__(self, name: str) -> type[T]:
        cls = self._classes.get(name)
        if cls is None:
            cls = import_class(self._base_type, name)
        return cls

    def register(self, name: str, cls: type[T]) -> None:
        if self._classes.get(name, cls) is not cls:
            raise errors.RegistryError(f'already registered: {name}')
        self._classes[name] = cls

    def names(self) -> tuple[str, ...]:
        """Return all registered names in registration order."""
        return tuple(self._classes)

    def load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        for modname, exc in import_package(self._package).items():
            log.warning('failed to load %s.%s: %s', self._package, modname, format_exc(exc))
