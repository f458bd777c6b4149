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
"""Class metadata reader — imports candidate modules and reads their markers."""

from __future__ import annotations

import importlib
import inspect
import os
import pkgutil
from types import ModuleType
from typing import Any, Protocol, runtime_checkable

from pywire.container.stereotypes import components_of

# Errors meaning "this dotted name does not name an importable module or class".
LOAD_ERRORS: tuple[type[Exception], ...] = (ImportError, AttributeError, ValueError)


@runtime_checkable
class MetadataReader(Protocol):
    """Port for loading types and reading their component markers.

    Type names are dotted paths to a module (``app.service.mailer``) or to a
    class inside one (``app.service.mailer.Mailer``).
    """

    def exists(self, type_name: str) -> bool: ...
    def load_module(self, module_name: str) -> ModuleType: ...
    def resolve(self, type_name: str) -> Any: ...
    def types_in(self, module_name: str) -> list[str]: ...
    def attributes_of(self, type_name: str) -> list[Any]: ...
    def defining_file(self, type_name: str) -> str | None: ...


class ImportlibMetadataReader:
    """MetadataReader backed by the import system.

    Modules are imported on demand with :func:`importlib.import_module` and
    dotted names resolved with :func:`pkgutil.resolve_name`, so the
    parent directory of every module root must be importable (on ``sys.path``).
    Errors raised by the imported code itself propagate unchanged.
    """

    def exists(self, type_name: str) -> bool:
        """Return True if *type_name* can be imported."""
        try:
            self.resolve(type_name)
        except LOAD_ERRORS:
            return False
        return True

    def resolve(self, type_name: str) -> Any:
        """Import and return the module or class named *type_name*.

        Raises one of :data:`LOAD_ERRORS` when the name cannot be loaded.
        """
        return pkgutil.resolve_name(type_name)

    def load_module(self, module_name: str) -> ModuleType:
        """Import *module_name*, letting any import error from its body propagate."""
        return importlib.import_module(module_name)

    def types_in(self, module_name: str) -> list[str]:
        """Return the classes defined in *module_name*, in definition order."""
        module = self.load_module(module_name)
        names: list[str] = []
        for attr_name, obj in vars(module).items():
            if inspect.isclass(obj) and obj.__module__ == module.__name__ and obj.__qualname__ == attr_name:
                names.append(f"{module.__name__}.{attr_name}")
        return names

    def attributes_of(self, type_name: str) -> list[Any]:
        """Return the component markers declared on the class *type_name*."""
        return components_of(self.resolve(type_name))

    def defining_file(self, type_name: str) -> str | None:
        """Return the canonical path of the source file defining *type_name*."""
        try:
            path = inspect.getsourcefile(self.resolve(type_name))
        except TypeError:
            # Built-in classes and modules have no source file.
            return None
        return os.path.realpath(path) if path else None
