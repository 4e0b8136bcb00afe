"""
Immutable rating parameter bundle.

A RatingParameters instance is fixed for the duration of a computation.
Callers that only want to tune a few knobs pass a partial mapping to
from_overrides(), which merges it over the documented defaults:

    params = RatingParameters.from_overrides({"K": 0.3, "relTau": 60})

Override keys may be either the wire names used by the admin console
("eloScale", "Vmax", ...) or the Python field names ("elo_scale", "v_max").
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping, Optional

from pmr.rating.constants import DEFAULT_PARAMS, PARAM_ALIASES


@dataclass(frozen=True)
class RatingParameters:
    """
    All tunable constants of the post-match adjustment.

    Attributes:
        K: Base learning rate
        elo_scale: Logistic steepness of the expected-outcome model
        margin_min: Floor of the margin factor (narrowest possible win)
        margin_gamma: Curvature of the margin factor
        upset_beta: Strength of the upset amplification
        upset_gamma: Curvature of the upset amplification
        pmr_min, pmr_max: Valid PMR range
        v_max: Volatility multiplier at zero reliability
        v_gamma: Curvature of the volatility decay toward 1
        rel_tau: Time constant of the reliability curve (in matches)
        rel_curve_gamma: Shape exponent of the reliability curve
        rel_min, rel_max: Valid reliability range
    """
    K: float = DEFAULT_PARAMS["K"]
    elo_scale: float = DEFAULT_PARAMS["eloScale"]
    margin_min: float = DEFAULT_PARAMS["marginMin"]
    margin_gamma: float = DEFAULT_PARAMS["marginGamma"]
    upset_beta: float = DEFAULT_PARAMS["upsetBeta"]
    upset_gamma: float = DEFAULT_PARAMS["upsetGamma"]

    pmr_min: float = DEFAULT_PARAMS["pmrMin"]
    pmr_max: float = DEFAULT_PARAMS["pmrMax"]

    v_max: float = DEFAULT_PARAMS["Vmax"]
    v_gamma: float = DEFAULT_PARAMS["vGamma"]

    rel_tau: float = DEFAULT_PARAMS["relTau"]
    rel_curve_gamma: float = DEFAULT_PARAMS["relCurveGamma"]

    rel_min: float = DEFAULT_PARAMS["relMin"]
    rel_max: float = DEFAULT_PARAMS["relMax"]

    def __post_init__(self) -> None:
        _validate_parameters(self)

    @classmethod
    def from_overrides(cls, overrides: Optional[Mapping[str, Any]] = None) -> "RatingParameters":
        """
        Build parameters from the defaults merged with a partial override.

        None values are ignored so a partially filled form can be passed
        through as-is.

        Raises:
            ValueError: If a key is not a known parameter, or if the merged
                values are not a usable configuration.
        """
        return cls().with_overrides(overrides)

    def with_overrides(self, overrides: Optional[Mapping[str, Any]] = None) -> "RatingParameters":
        """Return a copy of these parameters with some values replaced."""
        if not overrides:
            return self
        changes = {}
        for key, value in overrides.items():
            if value is None:
                continue
            changes[_field_name(key)] = float(value)
        return replace(self, **changes)

    def as_dict(self) -> dict[str, float]:
        """Field-name keyed dict, suitable for JSON storage."""
        return asdict(self)

    def as_wire_dict(self) -> dict[str, float]:
        """Wire-name keyed dict, as exchanged with the admin console."""
        values = asdict(self)
        return {wire: values[name] for wire, name in PARAM_ALIASES.items()}


_FIELD_NAMES = {f.name for f in fields(RatingParameters)}


def _field_name(key: str) -> str:
    if key in _FIELD_NAMES:
        return key
    if key in PARAM_ALIASES:
        return PARAM_ALIASES[key]
    raise ValueError(f"Unknown rating parameter: {key!r}")


def _validate_parameters(params: RatingParameters) -> None:
    for name, value in asdict(params).items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value!r}")
    if params.K <= 0.0:
        raise ValueError("K must be > 0")
    if params.elo_scale <= 0.0:
        raise ValueError("eloScale must be > 0")
    if not 0.0 <= params.margin_min <= 1.0:
        raise ValueError("marginMin must be between 0 and 1")
    if params.margin_gamma <= 0.0:
        raise ValueError("marginGamma must be > 0")
    if params.upset_beta < 0.0:
        raise ValueError("upsetBeta must be >= 0")
    if params.upset_gamma <= 0.0:
        raise ValueError("upsetGamma must be > 0")
    if params.pmr_min >= params.pmr_max:
        raise ValueError("pmrMin must be < pmrMax")
    if params.v_max < 1.0:
        raise ValueError("Vmax must be >= 1")
    if params.v_gamma <= 0.0:
        raise ValueError("vGamma must be > 0")
    if params.rel_tau <= 0.0:
        raise ValueError("relTau must be > 0")
    if params.rel_curve_gamma <= 0.0:
        raise ValueError("relCurveGamma must be > 0")
    if params.rel_min < 0.0 or params.rel_max > 100.0 or params.rel_min >= params.rel_max:
        raise ValueError("relMin/relMax must satisfy 0 <= relMin < relMax <= 100")
