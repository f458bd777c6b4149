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
"""Autowiring configuration properties."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from pywire.core.config import config_properties


@config_properties(prefix="pywire.autowiring")
class AutowiringProperties(BaseModel):
    """Configuration for the autowiring pass (pywire.autowiring.*).

    ``roots`` maps a dotted module prefix to the directory holding its
    sources, in lookup order. ``fast_checks`` lists the strings a file must
    contain (case-insensitive) to be inspected at all.
    """

    roots: dict[str, str] = Field(default_factory=dict)
    fast_checks: list[str] = Field(default_factory=list)
    discovery: str = "walk"
    discovery_timeout: float = Field(default=30.0, gt=0)

    @field_validator("roots", mode="before")
    @classmethod
    def _none_roots(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("fast_checks", mode="before")
    @classmethod
    def _single_check(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @property
    def enabled(self) -> bool:
        """Autowiring runs only when both roots and fast checks are configured."""
        return bool(self.roots) and any(self.fast_checks)
