from __future__ import annotations

import importlib
import pkgutil
from typing import TypeVar

from .. import errors, logs

log = logs.get(__name__)

T = TypeVar('T')


def import_package(pkgname: str) -> dict[str, Exception]:
    """Import all modules in *pkgname* and return any exceptions that occur."""
    exceptions: dict[str, Exception] = {}
    pkg = importlib.import_module(pkgname)
    for _, modname, ispkg in pkgutil.iter_modules(pkg.__path__):
        if ispkg:
            continue
        exc = import_module(modname, pkgname)
        if exc:
            exceptions[modname] = exc
    return exceptions


def import_module(modname: str, pkgname: str | None = None) -> Exception | None:
    """Import a module, optionally relative to *pkgname*."""
    name = '.'.join(filter(None, [pkgname, modname]))
    try:
        log.debug('loading: %s', name)
        if pkgname:
            importlib.import_module(f'.{modname}', pkgname)
        else:
            importlib.import_module(modname)
    except Exception as exc:
        return exc
    return None


def import_class(base_type: type[T], name: str) -> type[T]:
    """Import a subclass of *base_type* given `module.Class` notation."""
    mod_name, _, cls_name = name.rpartition('.')
    if not mod_name:
        raise errors.RegistryError(f'not found: {name}')
    try:
        cls = getattr(importlib.import_module(mod_name), cls_name)
    except (ImportError, AttributeError) as exc:
        raise errors.RegistryError(f'not found: {name}') from exc
    if not (isinstance(cls, type) and issubclass(cls, base_type)):
        raise errors.RegistryError(f'not a {base_type.__name__}: {name}')
    return cls
