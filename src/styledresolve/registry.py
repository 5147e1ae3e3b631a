"""Component definitions and the per-file registry that holds them."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from styledresolve.location import Span
from styledresolve.values import Attribute, AttributeValue

_MISSING = object()


@dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """A named styled component and the element it renders."""

    name: str
    tag: str
    attrs: tuple[Attribute, ...] = ()
    span: Span | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError(f"component {self.name!r} needs a non-empty tag")

    def attribute(self, key: str, default: object = _MISSING) -> AttributeValue | object:
        """Return the effective value of *key*: its last occurrence wins."""
        for attr in reversed(self.attrs):
            if attr.key == key:
                return attr.value
        if default is _MISSING:
            raise KeyError(key)
        return default

    def has_attribute(self, key: str) -> bool:
        return any(attr.key == key for attr in self.attrs)


class Registry:
    """Component name -> definition, in first-registration order.

    Redefining a name overwrites the earlier entry in place.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ComponentDefinition] = {}

    def define(self, definition: ComponentDefinition) -> None:
        self._entries[definition.name] = definition

    def get(self, name: str) -> ComponentDefinition | None:
        return self._entries.get(name)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __getitem__(self, name: str) -> ComponentDefinition:
        return self._entries[name]

    def __iter__(self) -> Iterator[ComponentDefinition]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        return list(self._entries)

    def element_type(self, name: str, components: Mapping[str, str] | None = None) -> str:
        """Element a JSX name stands for: registry, then custom map, then itself."""
        definition = self._entries.get(name)
        if definition is not None:
            return definition.tag
        if components and components.get(name):
            return components[name]
        return name
