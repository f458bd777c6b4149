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
"""Service definitions and the registry the autowiring pass fills."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pywire.container.exceptions import DuplicateServiceIdError


@dataclass(frozen=True)
class ServiceDefinition:
    """Metadata for a registered service.

    ``file`` is set only when the class is not the one its source file is
    named after, so a loader must import that file explicitly.
    """

    impl_type: type
    file: str | None = None


@runtime_checkable
class ServiceRegistry(Protocol):
    """Port for the service id -> definition mapping of a container builder."""

    def has(self, service_id: str) -> bool: ...

    def register(
        self,
        service_id: str,
        impl_type: type,
        file: str,
        needs_explicit_file: bool = False,
    ) -> None: ...

    def ids_for_type(self, impl_type: type) -> list[str]: ...


class DefinitionRegistry:
    """In-memory, insertion-ordered ServiceRegistry."""

    def __init__(self) -> None:
        self._definitions: dict[str, ServiceDefinition] = {}
        self._ids_by_type: dict[type, list[str]] = {}

    def has(self, service_id: str) -> bool:
        """Check if a service id is registered."""
        return service_id in self._definitions

    def register(
        self,
        service_id: str,
        impl_type: type,
        file: str,
        needs_explicit_file: bool = False,
    ) -> None:
        """Register *impl_type* under *service_id*.

        Raises:
            DuplicateServiceIdError: If *service_id* is already registered.
        """
        if service_id in self._definitions:
            raise DuplicateServiceIdError(service_id, impl_type)
        self._definitions[service_id] = ServiceDefinition(
            impl_type=impl_type,
            file=file if needs_explicit_file else None,
        )
        self._ids_by_type.setdefault(impl_type, []).append(service_id)

    def ids_for_type(self, impl_type: type) -> list[str]:
        """Return the ids *impl_type* is registered under, in registration order."""
        return list(self._ids_by_type.get(impl_type, []))

    def get(self, service_id: str) -> ServiceDefinition | None:
        return self._definitions.get(service_id)

    def definitions(self) -> dict[str, ServiceDefinition]:
        """Return a copy of all definitions keyed by service id."""
        return dict(self._definitions)

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
