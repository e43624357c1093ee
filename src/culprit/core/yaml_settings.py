"""YAML settings source with include support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from culprit.core.log import logger

CONFIG_FILENAME = "culprit.yaml"
DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"


def _cli_includes(argv: list[str]) -> list[str]:
    """Values of every `--include FILE` pair in argv."""
    includes = []
    i = 1
    while i < len(argv):
        if argv[i] == "--include" and i + 1 < len(argv):
            includes.append(argv[i + 1])
            i += 1
        i += 1
    return includes


def deep_merge(base: dict, override: dict) -> dict:
    """Return base with override merged in; nested dicts merge, other
    values from override win."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """Layered YAML configuration.

    Merge order, later wins:
        package defaults < user config < ./culprit.yaml < --include files

    Any file may carry an `include:` key (string or list) naming
    further files, resolved relative to the including file.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        includes = _cli_includes(sys.argv)
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        if base and includes:
            base = ([base] if isinstance(base, (str, os.PathLike))
                    else list(base))
            yaml_file = base + includes
        elif includes:
            yaml_file = includes
        else:
            yaml_file = base
        super().__init__(settings_cls, yaml_file)

    def _candidate_files(self, files) -> list[Path]:
        candidates = [
            DEFAULTS_FILE,
            Path(user_config_dir("culprit", appauthor=False))
            / CONFIG_FILENAME,
            Path(CONFIG_FILENAME),
        ]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            candidates.extend(Path(f).expanduser() for f in files)
        # ./culprit.yaml is also the model default yaml_file
        seen = set()
        unique = []
        for path in candidates:
            key = path.resolve() if path.exists() else path
            if key not in seen:
                seen.add(key)
                unique.append(path)
        return unique

    def _read_files(self, files, **kwargs):
        # Layers always deep-merge, whatever deep_merge= the caller passes
        result = {}
        for file_path in self._candidate_files(files):
            if not file_path.is_file():
                logger.debug(
                    "Configuration file not found (skipping)",
                    file=str(file_path),
                )
                continue
            logger.debug("Loading configuration", file=str(file_path))
            result = deep_merge(
                result, self._load_file_recursive(file_path, set())
            )
        return result

    def _load_file_recursive(
        self, filepath: Path, visited: set[Path]
    ) -> dict:
        """Load one file, resolving its include: directives first.

        Raises:
            ValueError: On a circular include
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]

        merged = {}
        for inc in includes:
            inc_path = Path(inc).expanduser()
            if not inc_path.is_absolute():
                inc_path = filepath.parent / inc_path
            merged = deep_merge(
                merged, self._load_file_recursive(inc_path, visited.copy())
            )
        return deep_merge(merged, data)
