"""Immutable simulation configuration.

This module defines the progression and combat knobs of a run. Configs are
validated once, when they are built, and loaded from YAML files with the
same section layout as the bundled ``arena_grinder/assets/default.yaml``:

    progression:
      curve: linear
      curve_coefficients: {linear: 50, quadratic: 20, logarithmic: 120}
      target_level: 10
      ...
    combat:
      enemy_base_hp: 5
      ...
"""

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional, Union

import yaml

from ..core.data import XPCurveKind, EnemyLevelMode, XP_CURVE_NAMES
from ..core.errors import ConfigurationError

Number = Union[int, float]

DEFAULT_CURVE_COEFFICIENTS: dict[XPCurveKind, Number] = {
    XPCurveKind.LINEAR: 50,
    XPCurveKind.QUADRATIC: 20,
    XPCurveKind.LOGARITHMIC: 120,
}

# Shipped inside the package so installed copies find it too
PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(PACKAGE_DIR, "assets", "default.yaml")


def _require_int(name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer", {name: value})
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}", {name: value})


def _require_number(name: str, value: Any, minimum: float, inclusive: bool = True) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number", {name: value})
    if value < minimum or (not inclusive and value == minimum):
        bound = ">=" if inclusive else ">"
        raise ConfigurationError(f"{name} must be {bound} {minimum}", {name: value})


@dataclass(frozen=True)
class XPCurve:
    """The active experience curve: a kind plus its coefficient."""
    kind: XPCurveKind
    coefficient: Number

    def __post_init__(self):
        if not isinstance(self.kind, XPCurveKind):
            raise ConfigurationError("Unknown XP curve kind", {"kind": self.kind})
        _require_number("coefficient", self.coefficient, 0, inclusive=False)

    @property
    def name(self) -> str:
        return XP_CURVE_NAMES[self.kind]

    @classmethod
    def from_selection(
        cls,
        kind: Union[str, XPCurveKind],
        coefficients: Optional[dict[Any, Number]] = None,
    ) -> "XPCurve":
        """Resolve a curve selection and per-curve coefficient table into one curve.

        Args:
            kind: Curve kind or its name ("linear", "quadratic", "logarithmic")
            coefficients: Coefficients keyed by kind or kind name; missing
                entries fall back to the defaults

        Raises:
            ConfigurationError: If the kind or a coefficient key is unknown
        """
        curve_kind = _parse_enum(XPCurveKind, kind, "curve")
        table = dict(DEFAULT_CURVE_COEFFICIENTS)
        for key, value in (coefficients or {}).items():
            table[_parse_enum(XPCurveKind, key, "curve_coefficients")] = value
        return cls(kind=curve_kind, coefficient=table[curve_kind])


@dataclass(frozen=True)
class ProgressionConfig:
    """Player progression knobs."""
    curve: XPCurve = XPCurve(XPCurveKind.LINEAR, 50)
    target_level: int = 10
    player_base_hp: int = 20
    player_base_damage: int = 2
    player_damage_per_level: int = 1
    xp_per_win: int = 30
    # Coefficient per curve kind, consulted when the curve is switched by name
    curve_coefficients: dict[XPCurveKind, Number] = field(
        default_factory=lambda: dict(DEFAULT_CURVE_COEFFICIENTS), hash=False
    )

    def __post_init__(self):
        if not isinstance(self.curve, XPCurve):
            raise ConfigurationError("curve must be an XPCurve", {"curve": self.curve})
        if not isinstance(self.curve_coefficients, dict):
            raise ConfigurationError("curve_coefficients must be a mapping",
                                     {"curve_coefficients": self.curve_coefficients})
        table = dict(DEFAULT_CURVE_COEFFICIENTS)
        for key, value in self.curve_coefficients.items():
            kind = _parse_enum(XPCurveKind, key, "curve_coefficients")
            _require_number(f"curve_coefficients.{kind.value}", value, 0, inclusive=False)
            table[kind] = value
        # The active curve always wins over the table entry for its kind
        table[self.curve.kind] = self.curve.coefficient
        object.__setattr__(self, "curve_coefficients", table)
        _require_int("target_level", self.target_level, 1)
        _require_int("player_base_hp", self.player_base_hp, 1)
        _require_int("player_base_damage", self.player_base_damage, 1)
        _require_int("player_damage_per_level", self.player_damage_per_level, 0)
        _require_int("xp_per_win", self.xp_per_win, 1)

    def select_curve(self, kind: Union[str, XPCurveKind]) -> "ProgressionConfig":
        """Copy of this config using curve ``kind`` with its coefficient from the table."""
        return replace(self, curve=XPCurve.from_selection(kind, self.curve_coefficients))


@dataclass(frozen=True)
class CombatConfig:
    """Enemy scaling and damage roll knobs (n = enemy level)."""
    enemy_base_hp: int = 5
    enemy_hp_per_level: int = 3
    enemy_base_damage: float = 1.0
    enemy_damage_per_level: float = 0.5
    min_multiplier: float = 0.7
    max_multiplier: float = 1.3
    damage_bias: float = 1.0
    crit_chance: float = 0.2
    crit_multiplier: float = 2.0
    enemy_level_mode: EnemyLevelMode = EnemyLevelMode.MATCH_PLAYER

    def __post_init__(self):
        _require_int("enemy_base_hp", self.enemy_base_hp, 1)
        _require_int("enemy_hp_per_level", self.enemy_hp_per_level, 0)
        _require_number("enemy_base_damage", self.enemy_base_damage, 0, inclusive=False)
        _require_number("enemy_damage_per_level", self.enemy_damage_per_level, 0)
        _require_number("min_multiplier", self.min_multiplier, 0, inclusive=False)
        _require_number("max_multiplier", self.max_multiplier, 0, inclusive=False)
        if self.max_multiplier < self.min_multiplier:
            raise ConfigurationError(
                "max_multiplier must be >= min_multiplier",
                {"min_multiplier": self.min_multiplier, "max_multiplier": self.max_multiplier},
            )
        _require_number("damage_bias", self.damage_bias, 1)
        _require_number("crit_chance", self.crit_chance, 0)
        if self.crit_chance > 1:
            raise ConfigurationError("crit_chance must be <= 1", {"crit_chance": self.crit_chance})
        _require_number("crit_multiplier", self.crit_multiplier, 1)
        if not isinstance(self.enemy_level_mode, EnemyLevelMode):
            raise ConfigurationError(
                "Unknown enemy level mode", {"enemy_level_mode": self.enemy_level_mode}
            )


def _parse_enum(enum_cls, value: Any, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Invalid {field_name}: expected one of {valid}", {field_name: value}
        ) from None


def _check_keys(section: str, data: dict[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{section}' section", {"keys": unknown})


def progression_from_dict(data: Optional[dict[str, Any]]) -> ProgressionConfig:
    """Build a ProgressionConfig from the ``progression`` section of a config file."""
    data = dict(data or {})
    _check_keys("progression", data, {f.name for f in fields(ProgressionConfig)})

    coefficients = data.get("curve_coefficients")
    if coefficients is not None and not isinstance(coefficients, dict):
        raise ConfigurationError("curve_coefficients must be a mapping",
                                 {"curve_coefficients": coefficients})
    data["curve"] = XPCurve.from_selection(data.get("curve", XPCurveKind.LINEAR), coefficients)
    data["curve_coefficients"] = dict(coefficients or {})
    return ProgressionConfig(**data)


def combat_from_dict(data: Optional[dict[str, Any]]) -> CombatConfig:
    """Build a CombatConfig from the ``combat`` section of a config file."""
    data = dict(data or {})
    _check_keys("combat", data, {f.name for f in fields(CombatConfig)})

    if "enemy_level_mode" in data:
        data["enemy_level_mode"] = _parse_enum(
            EnemyLevelMode, data["enemy_level_mode"], "enemy_level_mode"
        )
    return CombatConfig(**data)


def config_from_dict(data: Optional[dict[str, Any]]) -> tuple[ProgressionConfig, CombatConfig]:
    """Build both configs from a parsed config document."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Config document must be a mapping")
    _check_keys("root", data, {"progression", "combat"})
    return progression_from_dict(data.get("progression")), combat_from_dict(data.get("combat"))


def load_config(file_path: str = DEFAULT_CONFIG_PATH) -> tuple[ProgressionConfig, CombatConfig]:
    """Load progression and combat configs from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the YAML is malformed or holds invalid values
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {file_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML config: {e}", {"path": file_path})

    return config_from_dict(data)
