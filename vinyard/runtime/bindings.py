"""Reusable action-dispatch registry primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..input import Action, ActionKind

ActionHandler = Callable[[Action], "int | None"]


@dataclass(frozen=True)
class ActionBinding:
    """Mapping from one or more action kinds to a single handler."""

    kinds: tuple[ActionKind, ...]
    handler: ActionHandler


class ActionRegistry:
    """Small per-mode dispatch table keyed by ``ActionKind``."""

    def __init__(self) -> None:
        self._handlers: dict[ActionKind, ActionHandler] = {}

    def register_binding(self, binding: ActionBinding) -> ActionRegistry:
        """Register one binding, overwriting existing handlers for same kinds."""
        for kind in binding.kinds:
            self._handlers[kind] = binding.handler
        return self

    def register_bindings(self, *bindings: ActionBinding) -> ActionRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, action: Action) -> int | None:
        """Invoke the handler bound to ``action.kind``; unbound kinds are no-ops."""
        handler = self._handlers.get(action.kind)
        if handler is None:
            return None
        return handler(action)
