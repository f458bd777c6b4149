# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Spring-style stereotype decorators marking classes for autowiring.

Each stereotype attaches a component marker to the decorated class. The
marker's class name drives service id derivation:
- @component: generic managed service (``component.<name>``)
- @service: business logic layer (``service.<name>``)
- @repository: data access layer (``repository.<name>``)
- @controller: web controller (``controller.<name>``)

Any class whose instances carry ``__component_marker__ = True`` together with
``name`` and ``env`` attributes is a marker; attach custom ones with :func:`mark`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

T = TypeVar("T", bound=type)

_COMPONENTS_ATTR = "__pywire_components__"


class Component:
    """Marker for an auto-registrable service.

    Args:
        name: Explicit service id. When omitted the id is derived from the
            class name and its package.
        env: Environment tag the registration is restricted to. ``None``
            applies to every environment.
    """

    __component_marker__ = True

    def __init__(self, name: str | None = None, env: str | None = None) -> None:
        self.name = name or None
        self.env = env or None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, env={self.env!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.name, self.env) == (other.name, other.env)  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.name, self.env))


class Service(Component):
    """Marker for business logic services."""


class Repository(Component):
    """Marker for data access services."""


class Controller(Component):
    """Marker for web controllers."""


def is_component_marker(obj: Any) -> bool:
    """Return True if *obj* is an instance of a component marker class."""
    return not isinstance(obj, type) and bool(getattr(type(obj), "__component_marker__", False))


def components_of(cls: type) -> list[Any]:
    """Return the component markers declared directly on *cls*, top-down."""
    declared = cls.__dict__.get(_COMPONENTS_ATTR, ())
    return [m for m in declared if is_component_marker(m)]


def mark(marker: Any) -> Callable[[T], T]:
    """Attach an arbitrary component marker instance to a class.

    Usage:
        class Gateway(Component): ...

        @mark(Gateway(env="prod"))
        class PaymentGateway: ...
    """
    if not is_component_marker(marker):
        raise TypeError(f"{marker!r} is not a component marker")

    def decorator(cls: T) -> T:
        # Decorators apply bottom-up; prepend to keep source order.
        existing = cls.__dict__.get(_COMPONENTS_ATTR, ())
        setattr(cls, _COMPONENTS_ATTR, (marker, *existing))
        return cls

    return decorator


def _make_stereotype(stereotype_name: str, marker_cls: type[Component]) -> Callable[..., Any]:
    """Factory that creates a stereotype decorator for the given marker class."""

    @overload
    def stereotype(cls: T) -> T: ...

    @overload
    def stereotype(*, name: str | None = None, env: str | None = None) -> Callable[[T], T]: ...

    def stereotype(
        cls: T | None = None,
        *,
        name: str | None = None,
        env: str | None = None,
    ) -> T | Callable[[T], T]:
        decorator = mark(marker_cls(name=name, env=env))
        if cls is not None:
            return decorator(cls)
        return decorator

    stereotype.__name__ = stereotype_name
    stereotype.__qualname__ = stereotype_name
    return stereotype


component = _make_stereotype("component", Component)
service = _make_stereotype("service", Service)
repository = _make_stereotype("repository", Repository)
controller = _make_stereotype("controller", Controller)
