"""Content source interfaces for merge rules.

A merge rule substitutes tags in one document (the decorator) with
properties of another (the content being merged). How that content is
produced is up to the caller; rules only see these protocols.

The in-memory implementations below cover the common case where the
properties are already known strings.

Example:
    >>> content = DictContent({"title": "My Page"})
    >>> merge_context = StaticMergeContext(content)
    >>> merge_context.get_content_to_merge().get_property("title").exists()
    True

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tagweave.sink import Sink


@runtime_checkable
class Property(Protocol):
    """A named, possibly absent value of a Content."""

    def exists(self) -> bool:
        """Whether the content actually defines this property."""
        ...

    def write_to(self, sink: Sink) -> None:
        """Write the property value directly into a sink."""
        ...


@runtime_checkable
class Content(Protocol):
    """A document whose properties can be merged into another."""

    def get_property(self, name: str) -> Property:
        """Return the named property. Never None; check ``exists()``."""
        ...


@runtime_checkable
class MergeContext(Protocol):
    """Supplies the content to merge, if there is any."""

    def get_content_to_merge(self) -> Content | None:
        ...


class StaticProperty:
    """A property with a fixed string value."""

    __slots__ = ("value",)

    def __init__(self, value: str) -> None:
        self.value = value

    def exists(self) -> bool:
        return True

    def write_to(self, sink: Sink) -> None:
        sink.append(self.value)

    def __repr__(self) -> str:
        return f"StaticProperty({self.value!r})"


class _MissingProperty:
    """A property the content does not define. Writes nothing."""

    __slots__ = ()

    def exists(self) -> bool:
        return False

    def write_to(self, sink: Sink) -> None:
        pass

    def __repr__(self) -> str:
        return "MISSING_PROPERTY"


MISSING_PROPERTY = _MissingProperty()


class DictContent:
    """Content backed by a mapping of property name to string value.

    Property names are matched exactly.
    """

    __slots__ = ("_properties",)

    def __init__(self, properties: Mapping[str, str] | None = None) -> None:
        self._properties = {
            name: StaticProperty(value) for name, value in (properties or {}).items()
        }

    def get_property(self, name: str) -> Property:
        return self._properties.get(name, MISSING_PROPERTY)

    @property
    def property_names(self) -> frozenset[str]:
        return frozenset(self._properties)

    def __repr__(self) -> str:
        return f"DictContent({sorted(self._properties)})"


class StaticMergeContext:
    """MergeContext that always returns the same content (or none)."""

    __slots__ = ("content",)

    def __init__(self, content: Content | None = None) -> None:
        self.content = content

    def get_content_to_merge(self) -> Content | None:
        return self.content
