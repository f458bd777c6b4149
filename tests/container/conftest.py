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
"""Fixtures writing importable source trees for autowiring tests."""

from __future__ import annotations

import importlib
import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest


@pytest.fixture
def source_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[dict[str, str]], Path]]:
    """Write ``{relative path: source}`` under ``tmp_path/src`` and put it on sys.path.

    Modules imported from the tree are evicted from ``sys.modules`` afterwards
    so every test sees its own ``app`` package.
    """
    src = tmp_path / "src"
    src.mkdir()
    monkeypatch.syspath_prepend(str(src))
    top_level: set[str] = set()

    def write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = src / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content))
            top_level.add(Path(relative).parts[0].removesuffix(".py"))
        importlib.invalidate_caches()
        return src

    yield write

    for name in list(sys.modules):
        if name.split(".")[0] in top_level:
            del sys.modules[name]
