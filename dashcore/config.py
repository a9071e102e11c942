"""
CipherDash Configuration Management
====================================

Centralized configuration for the CipherDash toolkit using Python
dataclasses and TOML-based persistence.

Every tunable constant of the geometry validator, the strength scorer
and the attack simulator lives here. The defaults reproduce the
classic CipherDash rules exactly, so an absent ``config.toml`` yields
the reference behaviour.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class GeometryConfig:
    """Thresholds applied when validating a hand-drawn polygon.

    The checks run in order: vertex count floor, vertex count ceiling,
    minimum pairwise vertex distance, minimum shoelace area.
    """

    min_vertices: int = 3
    max_vertices: int = 12
    min_vertex_distance: float = 15.0
    min_area: float = 100.0


@dataclass(frozen=False, slots=True)
class ScoringConfig:
    """Weights, caps and penalties of the additive strength score.

    Reference:
        Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
    """

    base_score: float = 60.0
    entropy_weight: float = 8.0
    entropy_cap: float = 20.0
    diffusion_weight: float = 0.12
    diffusion_cap: float = 12.0
    length_mismatch_diffusion: float = 50.0
    key_space_cap: float = 8.0
    pass_threshold: float = 60.0

    # Penalty magnitudes (subtracted from the score)
    identical_penalty: float = 25.0
    reversal_penalty: float = 15.0
    low_diffusion_penalty: float = 10.0
    uniform_frequency_penalty: float = 5.0
    empty_pipeline_penalty: float = 40.0

    low_diffusion_threshold: float = 30.0
    uniformity_threshold: float = 20.0


@dataclass(frozen=False, slots=True)
class AttackConfig:
    """Parameters of the simulated frequency and brute-force attacks."""

    test_rate: float = 1_000_000.0  # keys tested per second
    frequency_baseline: float = 0.15
    frequency_cap: float = 30.0
    total_penalty_cap: float = 50.0

    def __post_init__(self) -> None:
        if self.test_rate <= 0:
            raise ValueError(f"attacks.test_rate must be positive, got {self.test_rate}")


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity, output locations and formats."""

    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    output_dir: str = "output"
    report_format: str = "console"
    debug: bool = False


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class DashConfig:
    """Master configuration aggregating all CipherDash settings.

    Usage:
        >>> config = DashConfig.load()                  # from default path
        >>> config = DashConfig.load("custom.toml")     # from custom path
        >>> config.geometry.max_vertices
        12
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    attacks: AttackConfig = field(default_factory=AttackConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> DashConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys gracefully fall back to dataclass
        defaults -- no ``KeyError`` is raised.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`DashConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            ValueError: If a value is out of range (e.g. a non-positive
                ``attacks.test_rate``) or the file is not valid TOML.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            geometry=cls._build_section(GeometryConfig, raw.get("geometry", {})),
            scoring=cls._build_section(ScoringConfig, raw.get("scoring", {})),
            attacks=cls._build_section(AttackConfig, raw.get("attacks", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are silently ignored so that
        forward-compatible config files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> DashConfig:
    """Module-level convenience wrapper around :meth:`DashConfig.load`.

    Caches the result so that repeated imports share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = DashConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
