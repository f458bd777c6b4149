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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from pywire.container.types import ServiceRegistration

PYWIRE_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "pywire": "bold magenta",
    "dim": "dim",
})

console = Console(theme=PYWIRE_THEME)


def print_banner() -> None:
    """Print the PyWire banner."""
    from pywire import __version__

    console.print("[pywire]PyWire[/pywire] [dim]— build-time service autowiring[/dim]")
    console.print(f"  [dim]:: PyWire :: (v{__version__})[/dim]")
    console.print("  [dim]Copyright 2026 Firefly Software Solutions Inc. | Apache 2.0 License[/dim]\n")


def print_registrations(registrations: list[ServiceRegistration], environment: str) -> None:
    """Print a table of the services registered by an autowiring pass."""
    if not registrations:
        console.print(f"[warning]No services registered[/warning] [dim](environment: {environment})[/dim]")
        return

    table = Table(title=f"[pywire]Autowired services[/pywire] [dim]({environment})[/dim]", border_style="dim")
    table.add_column("Service ID", style="info", no_wrap=True)
    table.add_column("Class", overflow="fold")
    table.add_column("Explicit file", style="dim", overflow="fold")

    for reg in registrations:
        cls = reg.impl_type
        explicit = reg.source_file if reg.needs_explicit_file else ""
        table.add_row(reg.service_id, f"{cls.__module__}.{cls.__qualname__}", explicit)

    console.print(table)
    console.print(f"[success]{len(registrations)} service(s) registered[/success]")
