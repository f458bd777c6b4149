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
"""Autowiring registrar: registers stereotype-decorated classes found on disk.

The pass runs once while the container is being built:

1. resolve the configured module roots,
2. let the discovery provider pre-filter source files by trigger strings,
3. map each candidate file to a dotted module name,
4. import every module (a module that cannot be imported is fatal),
5. match the component markers of the classes defined in those files
   against the current environment and compute their service ids,
6. commit all registrations at once.

Nothing is written to the registry unless every step succeeds.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from pywire.config.properties.autowiring import AutowiringProperties
from pywire.container.discovery import (
    SOURCE_SUFFIX,
    DiscoveryProvider,
    WalkDiscoveryProvider,
    create_discovery_provider,
)
from pywire.container.exceptions import DuplicateServiceIdError, TypeNotLoadableError
from pywire.container.metadata import LOAD_ERRORS, ImportlibMetadataReader, MetadataReader
from pywire.container.naming import derive_service_id, is_primary_type, namespace_segments
from pywire.container.registry import ServiceRegistry
from pywire.container.stereotypes import is_component_marker
from pywire.container.types import ModuleRoot, PassState, ServiceRegistration

if TYPE_CHECKING:
    from pywire.core.config import Config

logger = structlog.get_logger("pywire.container.registrar")

DEFAULT_ENVIRONMENT = "dev"


class AutowiringRegistrar:
    """Scan module roots and register component-marked classes as services.

    Args:
        roots: Dotted module prefix -> source directory, in lookup order.
        fast_checks: Strings a file must contain to be inspected.
        environment: Current environment tag; markers restricted to another
            environment are ignored.
        discovery: Candidate file provider (in-process walk by default).
        reader: Metadata reader (import system by default).
    """

    def __init__(
        self,
        roots: Mapping[str, str | Path] | None,
        fast_checks: Sequence[str] | None,
        environment: str = DEFAULT_ENVIRONMENT,
        *,
        discovery: DiscoveryProvider | None = None,
        reader: MetadataReader | None = None,
    ) -> None:
        self._roots = ModuleRoot.from_mapping(dict(roots or {}))
        self._fast_checks = [check for check in (fast_checks or []) if check]
        self._environment = environment
        self._discovery = discovery or WalkDiscoveryProvider()
        self._reader = reader or ImportlibMetadataReader()
        self.state = PassState.IDLE

    @classmethod
    def from_config(
        cls,
        config: Config,
        environment: str | None = None,
        *,
        discovery: DiscoveryProvider | None = None,
        reader: MetadataReader | None = None,
        base_dir: str | Path | None = None,
    ) -> AutowiringRegistrar:
        """Build a registrar from ``pywire.autowiring.*`` and ``pywire.environment``.

        Relative root directories are resolved against *base_dir* when given.
        """
        props = config.bind(AutowiringProperties)
        env = environment or str(config.get("pywire.environment", DEFAULT_ENVIRONMENT))
        if discovery is None and props.enabled:
            discovery = create_discovery_provider(props.discovery, props.discovery_timeout)
        roots: dict[str, str | Path] = dict(props.roots)
        if base_dir is not None:
            roots = {prefix: Path(base_dir) / directory for prefix, directory in roots.items()}
        return cls(roots, props.fast_checks, env, discovery=discovery, reader=reader)

    @property
    def environment(self) -> str:
        return self._environment

    def process(self, registry: ServiceRegistry) -> list[ServiceRegistration]:
        """Run the pass against *registry* and return the committed registrations.

        Raises:
            AutowiringException: On any misconfiguration; the registry is left
                untouched.
        """
        self.state = PassState.IDLE
        if not self._roots or not self._fast_checks:
            logger.debug("autowiring_skipped", reason="no roots or fast checks configured")
            self.state = PassState.REGISTRATIONS_COMMITTED
            return []

        logger.debug(
            "autowiring_started",
            roots=[root.prefix for root in self._roots],
            fast_checks=self._fast_checks,
            environment=self._environment,
        )
        try:
            roots = [root.resolve() for root in self._roots]
            self.state = PassState.ROOTS_RESOLVED

            candidates = self._discovery.discover(roots, self._fast_checks)
            self.state = PassState.CANDIDATES_DISCOVERED
            logger.debug("autowiring_candidates_found", count=len(candidates))

            modules = self._derive_module_names(roots, candidates)
            self.state = PassState.TYPE_NAMES_DERIVED

            self._validate_modules(modules)
            self.state = PassState.TYPES_VALIDATED

            planned = self._plan_registrations(modules, registry)
            self.state = PassState.ATTRIBUTES_MATCHED

            for reg in planned:
                registry.register(reg.service_id, reg.impl_type, reg.source_file, reg.needs_explicit_file)
        except Exception as exc:
            self.state = PassState.FAILED
            logger.error("autowiring_failed", error=str(exc).splitlines()[0] if str(exc) else type(exc).__name__)
            raise

        self.state = PassState.REGISTRATIONS_COMMITTED
        logger.info("autowiring_completed", registered=len(planned), environment=self._environment)
        return planned

    def _derive_module_names(self, roots: list[ModuleRoot], candidates: Sequence[str]) -> dict[str, str]:
        """Map candidate files to module names, keyed by module name."""
        modules: dict[str, str] = {}
        for path in candidates:
            module_name = module_name_for(path, roots)
            if module_name is None:
                logger.debug("autowiring_file_outside_roots", file=path)
                continue
            modules[module_name] = path
        return modules

    def _validate_modules(self, modules: Mapping[str, str]) -> None:
        for module_name, path in modules.items():
            try:
                self._reader.load_module(module_name)
            except LOAD_ERRORS as exc:
                raise TypeNotLoadableError(path, module_name, str(exc)) from exc

    def _plan_registrations(self, modules: Mapping[str, str], registry: ServiceRegistry) -> list[ServiceRegistration]:
        module_by_file = {path: module_name for module_name, path in modules.items()}
        planned: dict[str, ServiceRegistration] = {}

        def is_taken(service_id: str) -> bool:
            return service_id in planned or registry.has(service_id)

        for module_name in modules:
            for type_name in self._reader.types_in(module_name):
                source_file = self._reader.defining_file(type_name)
                if source_file is None or source_file not in module_by_file:
                    continue

                cls = self._reader.resolve(type_name)
                existing = registry.ids_for_type(cls)
                if existing:
                    logger.debug("autowiring_class_already_registered", type=type_name, service_ids=existing)
                    continue

                for marker in self._reader.attributes_of(type_name):
                    if not self._applies(marker):
                        continue
                    service_id = marker.name or derive_service_id(
                        cls.__name__,
                        namespace_segments(cls),
                        type(marker).__name__,
                        is_taken,
                    )
                    if is_taken(service_id):
                        raise DuplicateServiceIdError(service_id, cls)

                    planned[service_id] = ServiceRegistration(
                        service_id=service_id,
                        impl_type=cls,
                        source_file=source_file,
                        needs_explicit_file=not is_primary_type(cls, module_by_file[source_file]),
                    )
                    logger.debug("autowiring_service_planned", service_id=service_id, type=type_name)

        return list(planned.values())

    def _applies(self, marker: Any) -> bool:
        """A marker applies when it has no environment or the current one."""
        return is_component_marker(marker) and marker.env in (None, self._environment)


def module_name_for(path: str, roots: Sequence[ModuleRoot]) -> str | None:
    """Map a source file to its dotted module name.

    The first root in configured order whose directory contains *path* wins.
    ``pkg/__init__.py`` maps to ``pkg``. Returns None for files outside every root.
    """
    if not path.endswith(SOURCE_SUFFIX):
        return None
    for root in roots:
        prefix = root.directory.rstrip(os.sep) + os.sep
        if not path.startswith(prefix):
            continue
        parts = path[len(prefix) : -len(SOURCE_SUFFIX)].split(os.sep)
        if parts[-1] == "__init__":
            parts.pop()
        return root.module_name(".".join(parts)) or None
    return None
