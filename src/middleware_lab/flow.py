"""Flow class: ordered container and execution plan for FlowComponents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from middleware_lab.component import FlowComponent
from middleware_lab.exceptions import FlowConfigurationError

if TYPE_CHECKING:
    from middleware_lab.hooks import FlowHook


@dataclass(frozen=True)
class ResolvedFlow:
    """Immutable, pre-computed execution plan."""

    components: tuple[FlowComponent, ...]
    hooks: tuple[FlowHook, ...] = ()


class Flow:
    """Ordered container of FlowComponent instances."""

    def __init__(self, *components: FlowComponent | Flow) -> None:
        self._items: list[FlowComponent | Flow] = list(components)
        self._hooks: list[FlowHook] = []
        self._resolved: ResolvedFlow | None = None

    def add(self, *components: FlowComponent | Flow) -> Flow:
        self._items.extend(components)
        self._resolved = None
        return self

    def add_hook(self, hook: FlowHook) -> Flow:
        self._hooks.append(hook)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedFlow:
        if self._resolved is not None:
            return self._resolved

        flat: list[FlowComponent] = []
        hooks: list[FlowHook] = []
        self._flatten(self, flat, hooks)

        sorted_components = sorted(flat, key=lambda c: c.category.order)
        self._check_requirements(sorted_components)

        self._resolved = ResolvedFlow(
            components=tuple(sorted_components),
            hooks=tuple(hooks),
        )
        return self._resolved

    @staticmethod
    def _flatten(
        flow: Flow, out: list[FlowComponent], hooks: list[FlowHook]
    ) -> None:
        for hook in flow._hooks:
            if hook not in hooks:
                hooks.append(hook)
        for item in flow._items:
            if isinstance(item, Flow):
                Flow._flatten(item, out, hooks)
            elif isinstance(item, FlowComponent):
                out.append(item)

    @staticmethod
    def _check_requirements(components: list[FlowComponent]) -> None:
        present = {c.category for c in components}
        for component in components:
            missing = component.requires - present
            if missing:
                names = ", ".join(sorted(cat.value for cat in missing))
                raise FlowConfigurationError(
                    f"{type(component).__name__} requires a {names} component "
                    "earlier in the flow"
                )
