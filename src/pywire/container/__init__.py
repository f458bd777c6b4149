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
"""PyWire autowiring — build-time discovery and registration of services."""

from pywire.container.discovery import (
    DiscoveryProvider,
    GrepDiscoveryProvider,
    WalkDiscoveryProvider,
    create_discovery_provider,
)
from pywire.container.exceptions import (
    AutoscanDirectoryNotFoundError,
    AutowiringException,
    DiscoveryProviderError,
    DuplicateServiceIdError,
    TypeNotLoadableError,
)
from pywire.container.metadata import ImportlibMetadataReader, MetadataReader
from pywire.container.naming import derive_service_id
from pywire.container.registrar import AutowiringRegistrar
from pywire.container.registry import DefinitionRegistry, ServiceDefinition, ServiceRegistry
from pywire.container.stereotypes import (
    Component,
    Controller,
    Repository,
    Service,
    component,
    controller,
    mark,
    repository,
    service,
)
from pywire.container.types import ModuleRoot, PassState, ServiceRegistration

__all__ = [
    "AutoscanDirectoryNotFoundError",
    "AutowiringException",
    "AutowiringRegistrar",
    "Component",
    "Controller",
    "DefinitionRegistry",
    "DiscoveryProvider",
    "DiscoveryProviderError",
    "DuplicateServiceIdError",
    "GrepDiscoveryProvider",
    "ImportlibMetadataReader",
    "MetadataReader",
    "ModuleRoot",
    "PassState",
    "Repository",
    "Service",
    "ServiceDefinition",
    "ServiceRegistration",
    "ServiceRegistry",
    "TypeNotLoadableError",
    "WalkDiscoveryProvider",
    "component",
    "controller",
    "create_discovery_provider",
    "derive_service_id",
    "mark",
    "repository",
    "service",
]
