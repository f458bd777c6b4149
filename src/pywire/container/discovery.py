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
"""Candidate file discovery — fast textual pre-filter for the autowiring pass.

A provider returns the Python source files under the module roots that
contain at least one trigger string (case-insensitive). Only those files
are imported and inspected, so the triggers should be the decorator names
used in the code base (``@component``, ``@service``, ...).
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

import structlog

from pywire.container.exceptions import DiscoveryProviderError
from pywire.container.types import ModuleRoot
from pywire.kernel.exceptions import ConfigurationException

logger = structlog.get_logger("pywire.container.discovery")

SOURCE_SUFFIX = ".py"

_IGNORE_DIRS = frozenset({"__pycache__", "node_modules"})


@runtime_checkable
class DiscoveryProvider(Protocol):
    """Port for finding candidate source files under module roots."""

    def discover(self, roots: Sequence[ModuleRoot], triggers: Sequence[str]) -> list[str]: ...


def _is_ignored_dir(name: str) -> bool:
    return name in _IGNORE_DIRS or name.startswith(".")


def _visible_root_index(path: str, roots: Sequence[ModuleRoot]) -> int | None:
    """Index of the first root containing *path* without passing through an ignored directory."""
    for index, root in enumerate(roots):
        prefix = root.directory.rstrip(os.sep) + os.sep
        if path.startswith(prefix):
            parents = path[len(prefix) :].split(os.sep)[:-1]
            if not any(_is_ignored_dir(part) for part in parents):
                return index
    return None


def _unique(paths: Iterable[str]) -> list[str]:
    """Canonicalise paths and drop duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    for path in paths:
        seen.setdefault(os.path.realpath(path), None)
    return list(seen)


class WalkDiscoveryProvider:
    """In-process discovery: walk each root and scan file contents.

    Hidden directories, ``__pycache__`` and ``node_modules`` are skipped.
    Matches are returned root by root, sorted by path within each root.
    """

    def discover(self, roots: Sequence[ModuleRoot], triggers: Sequence[str]) -> list[str]:
        needles = [t.lower() for t in triggers if t]
        if not needles:
            return []
        found: list[str] = []
        for root in roots:
            found.extend(sorted(self._scan_root(root.directory, needles)))
        return _unique(found)

    def _scan_root(self, directory: str, needles: list[str]) -> list[str]:
        matches: list[str] = []
        for dirpath, dirnames, filenames in os.walk(directory):
            dirnames[:] = sorted(d for d in dirnames if not _is_ignored_dir(d))
            for filename in sorted(filenames):
                if not filename.endswith(SOURCE_SUFFIX):
                    continue
                path = os.path.join(dirpath, filename)
                if self._contains_any(path, needles):
                    matches.append(path)
        return matches

    @staticmethod
    def _contains_any(path: str, needles: list[str]) -> bool:
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                content = f.read().lower()
        except OSError as exc:
            raise DiscoveryProviderError("walk", f"cannot read '{path}': {exc}") from exc
        return any(needle in content for needle in needles)


class GrepDiscoveryProvider:
    """Discovery backed by the ``grep`` utility.

    Runs ``grep -rliF`` once over all roots. Exit status 1 means nothing
    matched; a missing executable, any other non-zero status or a timeout is
    fatal. Failures are never retried. Matches under hidden directories,
    ``__pycache__`` and ``node_modules`` are dropped, as the walk provider
    never visits them.
    """

    def __init__(self, executable: str = "grep", timeout: float = 30.0) -> None:
        self._executable = executable
        self._timeout = timeout

    def discover(self, roots: Sequence[ModuleRoot], triggers: Sequence[str]) -> list[str]:
        patterns = [t for t in triggers if t]
        if not patterns or not roots:
            return []

        cmd = [self._executable, "-rliF", f"--include=*{SOURCE_SUFFIX}"]
        for pattern in patterns:
            cmd.extend(["-e", pattern])
        cmd.append("--")
        cmd.extend(root.directory for root in roots)

        logger.debug("grep_discovery_started", command=" ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self._timeout)
        except FileNotFoundError as exc:
            raise DiscoveryProviderError(self._executable, "executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise DiscoveryProviderError(self._executable, f"timed out after {self._timeout:g}s") from exc

        if result.returncode == 1:
            return []
        if result.returncode != 0:
            reason = result.stderr.strip() or f"exit status {result.returncode}"
            raise DiscoveryProviderError(self._executable, reason)

        ranked: list[tuple[int, str]] = []
        for line in result.stdout.splitlines():
            index = _visible_root_index(line, roots) if line.endswith(SOURCE_SUFFIX) else None
            if index is not None:
                ranked.append((index, line))
        return _unique(line for _, line in sorted(ranked))


def create_discovery_provider(name: str = "walk", timeout: float = 30.0) -> DiscoveryProvider:
    """Create a discovery provider by its configured name (``walk`` or ``grep``)."""
    normalized = (name or "walk").strip().lower()
    if normalized == "walk":
        return WalkDiscoveryProvider()
    if normalized == "grep":
        return GrepDiscoveryProvider(timeout=timeout)
    raise ConfigurationException(
        f"Unknown discovery provider '{name}'. Supported: walk, grep",
        code="AUTOWIRING_UNKNOWN_DISCOVERY",
        context={"discovery": name},
    )
