"""Manifest loading and configuration defaults.

The project manifest (``Nargo.toml``) carries a ``[benchmark]`` table. String
values map a contract name to its benchmark suite file; a handful of reserved
keys tune the comparison::

    [benchmark]
    regression_threshold_percentage = 2.5
    report_path = "benchmark_diff.md"
    reports_dir = "benchmarks"
    token = "benchmarks/token_bench.py"
"""

from __future__ import annotations

import logging
import math
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger("benchdiff.config")

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

MANIFEST_FILE = "Nargo.toml"
DEFAULT_REPORT_PATH = "benchmark_diff.md"
DEFAULT_REPORTS_DIR = "benchmarks"
DEFAULT_THRESHOLD_PERCENTAGE = 2.5
BASE_SUFFIX = "_base"
LATEST_SUFFIX = "_latest"
RESULT_FILE_SUFFIX = ".benchmark.json"

_RESERVED_KEYS = frozenset({"regression_threshold_percentage", "report_path", "reports_dir"})


class ConfigError(ValueError):
    """Raised when run-level configuration is malformed."""


@dataclass(frozen=True)
class BenchmarkConfig:
    """Resolved configuration for one benchdiff invocation."""

    repo_root: Path
    contracts: dict[str, Path] = field(default_factory=lambda: dict[str, Path]())
    threshold: float = DEFAULT_THRESHOLD_PERCENTAGE / 100
    report_path: Path = Path(DEFAULT_REPORT_PATH)
    reports_dir: Path = Path(DEFAULT_REPORTS_DIR)
    base_suffix: str = BASE_SUFFIX
    latest_suffix: str = LATEST_SUFFIX
    strict_duplicates: bool = False

    def result_path(self, unit: str, suffix: str) -> Path:
        """Return the result file path for *unit* with the given run suffix."""
        return self.reports_dir / f"{unit}{suffix}{RESULT_FILE_SUFFIX}"

    def with_overrides(self, **overrides: Any) -> BenchmarkConfig:
        """Return a copy with every non-None override applied."""
        applied = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **applied)


# ---------------------------------------------------------------------------
# Threshold parsing
# ---------------------------------------------------------------------------


def parse_threshold(value: object) -> float:
    """Convert a percentage (``2.5`` or ``"2.5"``) into a fraction (``0.025``).

    Raises ConfigError for non-numeric, non-finite or negative input.
    """
    if isinstance(value, bool):
        msg = f"Invalid threshold: {value!r}. Must be a non-negative number."
        raise ConfigError(msg)
    try:
        percentage = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        msg = f"Invalid threshold: {value!r}. Must be a non-negative number."
        raise ConfigError(msg) from None
    if not math.isfinite(percentage) or percentage < 0:
        msg = f"Invalid threshold: {value!r}. Must be a non-negative number."
        raise ConfigError(msg)
    return percentage / 100


# ---------------------------------------------------------------------------
# Manifest loading
# ---------------------------------------------------------------------------


def read_manifest(path: Path) -> dict[str, Any]:
    """Parse the manifest at *path*.  Raises ConfigError if it is not valid TOML."""
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Error parsing {path}: {exc}"
        raise ConfigError(msg) from exc


def load_config(repo_root: Path, manifest: Path | None = None) -> BenchmarkConfig:
    """Build a BenchmarkConfig from the manifest under *repo_root*.

    A missing manifest yields the defaults.  Suite paths are resolved relative
    to the manifest's directory; report paths relative to *repo_root*.
    """
    repo_root = repo_root.resolve()
    manifest_path = manifest if manifest is not None else repo_root / MANIFEST_FILE
    if not manifest_path.is_absolute():
        manifest_path = repo_root / manifest_path

    if not manifest_path.is_file():
        logger.info("No manifest at %s, using defaults", manifest_path)
        return BenchmarkConfig(
            repo_root=repo_root,
            report_path=repo_root / DEFAULT_REPORT_PATH,
            reports_dir=repo_root / DEFAULT_REPORTS_DIR,
        )

    data = read_manifest(manifest_path)
    section = data.get("benchmark", {})
    if not isinstance(section, dict):
        msg = f"[benchmark] in {manifest_path} must be a table"
        raise ConfigError(msg)

    threshold = parse_threshold(
        section.get("regression_threshold_percentage", DEFAULT_THRESHOLD_PERCENTAGE)
    )
    report_path = repo_root / _string_setting(section, "report_path", DEFAULT_REPORT_PATH)
    reports_dir = repo_root / _string_setting(section, "reports_dir", DEFAULT_REPORTS_DIR)

    contracts: dict[str, Path] = {}
    for name, suite in section.items():
        if name in _RESERVED_KEYS:
            continue
        if not isinstance(suite, str):
            msg = f"[benchmark].{name} must be a path to a benchmark file, got {suite!r}"
            raise ConfigError(msg)
        contracts[name] = (manifest_path.parent / suite).resolve()

    logger.info(
        "Loaded %s: %d contract(s), threshold %.4g%%",
        manifest_path,
        len(contracts),
        threshold * 100,
    )
    return BenchmarkConfig(
        repo_root=repo_root,
        contracts=contracts,
        threshold=threshold,
        report_path=report_path,
        reports_dir=reports_dir,
    )


def _string_setting(section: dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value:
        msg = f"[benchmark].{key} must be a non-empty string, got {value!r}"
        raise ConfigError(msg)
    return value
