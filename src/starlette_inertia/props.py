from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional

from .errors import PropResolutionError
from .headers import (
    HEADER_PARTIAL_COMPONENT,
    HEADER_PARTIAL_EXCEPT,
    HEADER_PARTIAL_ONLY,
    split_header_list,
)

Props = Dict[str, Any]
ValidationErrors = Dict[str, str]

ERRORS_PROP = "errors"


class PropKind(enum.Enum):
    PLAIN = "plain"
    # Producer called on every render that selects the prop.
    DEFERRED = "deferred"
    # Producer called only when a matching partial reload names the prop.
    LAZY = "lazy"
    # Producer called on every render, partial or full, unless excluded by name.
    ALWAYS = "always"


@dataclass(frozen=True)
class Prop:
    kind: PropKind
    value: Any

    def materialize(self) -> Any:
        if self.kind is PropKind.PLAIN:
            return self.value
        return self.value()


def plain(value: Any) -> Prop:
    return Prop(PropKind.PLAIN, value)


def deferred(producer: Callable[[], Any]) -> Prop:
    return Prop(PropKind.DEFERRED, producer)


def lazy(producer: Callable[[], Any]) -> Prop:
    """
    Wrap a producer that is skipped on normal visits.

    The value is computed only for a partial reload of the same component whose
    `X-Inertia-Partial-Data` list names this prop.
    """
    return Prop(PropKind.LAZY, producer)


def always(producer: Callable[[], Any]) -> Prop:
    """Wrap a producer that is included even when a partial reload did not ask for it."""
    return Prop(PropKind.ALWAYS, producer)


def as_prop(value: Any) -> Prop:
    if isinstance(value, Prop):
        return value
    if callable(value):
        return Prop(PropKind.DEFERRED, value)
    return Prop(PropKind.PLAIN, value)


def kind_of(value: Any) -> PropKind:
    return as_prop(value).kind


@dataclass(frozen=True)
class PartialReload:
    """Partial reload directive parsed from the `X-Inertia-Partial-*` headers."""

    component: str
    only: FrozenSet[str] = field(default_factory=frozenset)
    except_: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> Optional["PartialReload"]:
        component = headers.get(HEADER_PARTIAL_COMPONENT) or ""
        if not component:
            return None
        return cls(
            component=component,
            only=frozenset(split_header_list(headers, HEADER_PARTIAL_ONLY)),
            except_=frozenset(split_header_list(headers, HEADER_PARTIAL_EXCEPT)),
        )

    def matches(self, component: str) -> bool:
        return self.component == component


def merge_props(*sources: Optional[Mapping[str, Any]]) -> Props:
    """Shallow merge, later sources overwrite same-named keys of earlier ones."""
    out: Props = {}
    for source in sources:
        if source:
            out.update(source)
    return out


def select_prop_names(props: Mapping[str, Any], component: str, partial: Optional[PartialReload]) -> List[str]:
    """Names to materialize, in the insertion order of `props`."""
    if partial is None or not partial.matches(component):
        return [name for name, value in props.items() if kind_of(value) is not PropKind.LAZY]

    if partial.only:
        names = [
            name
            for name, value in props.items()
            if name in partial.only or kind_of(value) is PropKind.ALWAYS
        ]
    else:
        names = [name for name, value in props.items() if kind_of(value) is not PropKind.LAZY]

    # Exclusion wins over both `only` and always-props.
    return [name for name in names if name not in partial.except_]


def resolve_props(
    props: Mapping[str, Any],
    component: str,
    partial: Optional[PartialReload] = None,
    validation_errors: Optional[Mapping[str, str]] = None,
) -> Props:
    """
    Select and materialize the page props for one render.

    Raises `PropResolutionError` if any selected producer raises; nothing is
    returned in that case, so a render never emits a half-resolved page.
    """
    out: Props = {}
    for name in select_prop_names(props, component, partial):
        prop = as_prop(props[name])
        try:
            out[name] = prop.materialize()
        except Exception as e:
            raise PropResolutionError(name, f"cannot resolve prop {name!r}: {e}") from e

    out[ERRORS_PROP] = dict(validation_errors or {})
    return out
