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
"""Autowiring exceptions — fatal errors that abort the autowiring pass."""

from __future__ import annotations

from pywire.kernel.exceptions import InfrastructureException


class AutowiringException(InfrastructureException):
    """Fatal error during the autowiring pass — no registration is committed.

    Every subclass renders a multi-line message: a headline followed by the
    details a developer needs to fix the configuration.
    """

    def __init__(self, headline: str, details: list[str] | None = None, *, code: str, context: dict) -> None:
        self.headline = headline
        lines = [f"{type(self).__name__}: {headline}"]
        if details:
            lines.append("")
            lines.extend(f"  {line}" if line else "" for line in details)
        super().__init__(message="\n".join(lines), code=code, context=context)

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class AutoscanDirectoryNotFoundError(AutowiringException):
    """A configured module root directory does not exist."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(
            f"Autoscan directory '{directory}' does not exist",
            ["Check 'pywire.autowiring.roots' in pywire.yaml"],
            code="AUTOWIRING_DIRECTORY_NOT_FOUND",
            context={"directory": directory},
        )


class DiscoveryProviderError(AutowiringException):
    """The file discovery provider is unavailable or failed."""

    def __init__(self, utility: str, reason: str) -> None:
        self.utility = utility
        self.reason = reason
        super().__init__(
            f"Autoscan with {utility} failed: {reason}",
            [
                f"Is the '{utility}' utility installed and readable?",
                "Set 'pywire.autowiring.discovery: walk' to scan files in-process",
            ],
            code="AUTOWIRING_DISCOVERY_FAILED",
            context={"utility": utility, "reason": reason},
        )


class TypeNotLoadableError(AutowiringException):
    """A module name derived from a candidate file cannot be imported."""

    def __init__(self, file: str, type_name: str, reason: str | None = None) -> None:
        self.file = file
        self.type_name = type_name
        self.reason = reason
        details = []
        if reason:
            details.extend([f"Import failed: {reason}", ""])
        details.extend([
            "Check 'pywire.autowiring.roots' if you specified the path correctly,",
            "and that the root's parent directory is on sys.path.",
        ])
        super().__init__(
            f"File '{file}' does not define module '{type_name}', or the module is not importable",
            details,
            code="AUTOWIRING_TYPE_NOT_LOADABLE",
            context={"file": file, "type_name": type_name, "reason": reason},
        )


class DuplicateServiceIdError(AutowiringException):
    """A service identifier is already registered."""

    def __init__(self, service_id: str, impl_type: type | str) -> None:
        self.service_id = service_id
        self.impl_type = impl_type
        type_name = impl_type if isinstance(impl_type, str) else _qualified_name(impl_type)
        super().__init__(
            f"Class '{type_name}' cannot be added as service '{service_id}', service ID already exists",
            [
                "Fix: Give one of the classes an explicit name, e.g. @component(name='...'),",
                "or restrict it to an environment with env='...'",
            ],
            code="AUTOWIRING_DUPLICATE_ID",
            context={"service_id": service_id, "type_name": type_name},
        )


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"
