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
"""'pywire scan' — Run the autowiring pass and list the registered services."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import click

from pywire.cli.console import console, print_registrations
from pywire.config.properties.autowiring import AutowiringProperties
from pywire.container.discovery import create_discovery_provider
from pywire.container.registrar import AutowiringRegistrar
from pywire.container.registry import DefinitionRegistry
from pywire.core.config import Config
from pywire.kernel.exceptions import PyWireException
from pywire.logging.structlog_adapter import StructlogAdapter


def _load_config(config_path: Path | None, base_dir: Path, profiles: tuple[str, ...]) -> Config:
    if config_path is not None:
        return Config.from_file(config_path)
    return Config.from_sources(base_dir, active_profiles=list(profiles))


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: pywire.yaml/pywire.toml in the base directory).",
)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=".",
    show_default=True,
    help="Directory config files and relative roots are resolved against.",
)
@click.option("--env", "environment", default=None, help="Environment tag (overrides pywire.environment).")
@click.option("--profile", "profiles", multiple=True, help="Config profile overlay to load (repeatable).")
@click.option(
    "--path",
    "import_paths",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to prepend to sys.path before importing (repeatable).",
)
@click.option(
    "--discovery",
    type=click.Choice(["walk", "grep"]),
    default=None,
    help="Override the configured discovery provider.",
)
def scan_command(
    config_path: Path | None,
    base_dir: Path,
    environment: str | None,
    profiles: tuple[str, ...],
    import_paths: tuple[Path, ...],
    discovery: str | None,
) -> None:
    """Scan the configured module roots and list the services they register."""
    base_dir = base_dir.resolve()
    try:
        config = _load_config(config_path, base_dir, profiles)
        StructlogAdapter().configure(config)

        for path in reversed([base_dir, *import_paths]):
            resolved = str(path.resolve())
            if resolved not in sys.path:
                sys.path.insert(0, resolved)
        importlib.invalidate_caches()

        provider = None
        if discovery:
            timeout = config.bind(AutowiringProperties).discovery_timeout
            provider = create_discovery_provider(discovery, timeout)
        registrar = AutowiringRegistrar.from_config(config, environment, discovery=provider, base_dir=base_dir)
        registrations = registrar.process(DefinitionRegistry())
    except PyWireException as exc:
        console.print(str(exc), style="error", markup=False, highlight=False)
        sys.exit(1)

    print_registrations(registrations, registrar.environment)
