from __future__ import annotations

from typing import Any, Dict

from models.enums import SheetKind


_REGISTRY: Dict[SheetKind, Any] = {}


def register(kind: SheetKind, factory) -> None:
    _REGISTRY[kind] = factory


def get_builder(kind: SheetKind):
    if kind not in _REGISTRY:
        raise KeyError(f"No builder for sheet kind: {kind.value}")
    return _REGISTRY[kind]()


def available_builders() -> Dict[SheetKind, Any]:
    return dict(_REGISTRY)
