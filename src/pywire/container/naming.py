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
"""Service id derivation for autowired classes.

A class ``UserRepository`` marked with ``@repository`` is registered as
``repository.user``. When that id is already taken, enclosing package
names are prepended one at a time, innermost first, until the id is free:
``repository.admin.user``, ``repository.app.admin.user``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence


def lower_first(text: str) -> str:
    """Lowercase the first character of *text*, leaving the rest untouched."""
    return text[:1].lower() + text[1:]


def strip_marker_suffix(simple_name: str, marker_name: str) -> str:
    """Strip *marker_name* from the end of *simple_name*.

    The match is case-sensitive. A name consisting only of the suffix is
    returned unchanged so the result is never empty.
    """
    if marker_name and simple_name.endswith(marker_name) and len(simple_name) > len(marker_name):
        return simple_name[: -len(marker_name)]
    return simple_name


def derive_service_id(
    simple_name: str,
    namespace: Sequence[str],
    marker_name: str,
    is_taken: Callable[[str], bool],
) -> str:
    """Derive a service id for a class that has no explicit name.

    Args:
        simple_name: The class name without its module (``UserRepository``).
        namespace: Enclosing package segments, outermost first
            (``["app", "admin"]``).
        marker_name: Class name of the component marker (``Repository``).
        is_taken: Predicate telling whether an id is already registered.

    Segments named after the marker are skipped. The comparison ignores the
    case of the first letter, so the package ``repository`` matches the
    marker ``Repository`` as well as ``Repository`` itself.

    Returns:
        The first free candidate. When the namespace is exhausted the last
        candidate is returned even though it is taken, so the caller reports
        it as a duplicate.
    """
    base = lower_first(marker_name)
    class_part = lower_first(strip_marker_suffix(simple_name, marker_name))
    segments = list(namespace)
    middle = "."
    candidate = f"{base}{middle}{class_part}"

    while is_taken(candidate) and segments:
        segment = segments.pop()
        # Packages named after the marker (``repository``) add nothing to the id.
        while _same_name(segment, marker_name) and segments:
            segment = segments.pop()
        if _same_name(segment, marker_name):
            break
        middle = f".{lower_first(segment)}{middle}"
        candidate = f"{base}{middle}{class_part}"

    return candidate


def _same_name(segment: str, marker_name: str) -> bool:
    return lower_first(segment) == lower_first(marker_name)


def _normalize(name: str) -> str:
    return name.replace("_", "").lower()


def is_primary_type(cls: type, module_name: str) -> bool:
    """Return True if *cls* is the class its module file is named after.

    ``user_repository.py`` and ``UserRepository.py`` both name ``UserRepository``.
    """
    return _normalize(module_name.rsplit(".", 1)[-1]) == _normalize(cls.__name__)


def namespace_segments(cls: type) -> list[str]:
    """Return the package segments enclosing *cls*, outermost first.

    The module's own segment is left out when the module is named after the
    class, so ``app.admin.user.User`` yields ``["app", "admin"]`` while
    ``app.admin.models.User`` yields ``["app", "admin", "models"]``.
    """
    module_name = cls.__module__
    segments = module_name.split(".")
    if is_primary_type(cls, module_name):
        segments.pop()
    return segments
