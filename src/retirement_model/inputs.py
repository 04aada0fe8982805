# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Household input record for retirement projections.

This module provides the validated, immutable InputRecord consumed by both the
deterministic projector and the Monte Carlo simulator, together with helpers
to parse loosely-typed key/value payloads (form fields, JSON bodies) and to
overlay an optional external defaults file.
"""

import json
import logging
import math
from dataclasses import asdict, dataclass, fields
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when an input field is missing, unparseable or out of range."""


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("booleans are not numeric inputs")
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        result = float(value.strip())
    else:
        raise TypeError(f"expected a number, got {type(value).__name__}")
    if math.isnan(result) or math.isinf(result):
        raise ValueError("value must be finite")
    return result


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not numeric inputs")
    if isinstance(value, int):
        return value
    return int(_to_float(value))


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"expected an ISO date, got {type(value).__name__}")


def _to_seed(value: Any) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _to_int(value)


# Keys used by the calculator form and its defaults.json files
FIELD_ALIASES: Dict[str, str] = {
    "currentDate": "reference_date",
    "yourBirthdate": "primary_birthdate",
    "spouseBirthdate": "spouse_birthdate",
    "retirementAge": "retirement_age",
    "maxAge": "max_age",
    "taxableAccounts": "taxable_balance",
    "retirementAccounts": "tax_deferred_balance",
    "annualExpenses": "annual_expenses",
    "yourSSAge": "primary_ss_claim_age",
    "yourSSBenefitAtFRA": "primary_ss_benefit_at_fra",
    "spouseSSAge": "spouse_ss_claim_age",
    "spouseOwnBenefit": "spouse_ss_benefit_at_fra",
    "inflationRate": "inflation_rate",
    "returnRate": "return_rate",
    "taxRate": "tax_rate",
    "stdDev": "return_std_dev",
    "simulations": "simulations",
    "seed": "seed",
}

_DATE_FIELDS = ("reference_date", "primary_birthdate", "spouse_birthdate")

_NON_NEGATIVE_FIELDS = (
    "retirement_age",
    "max_age",
    "taxable_balance",
    "tax_deferred_balance",
    "annual_expenses",
    "primary_ss_claim_age",
    "primary_ss_benefit_at_fra",
    "spouse_ss_claim_age",
    "spouse_ss_benefit_at_fra",
    "inflation_rate",
    "return_rate",
    "tax_rate",
    "return_std_dev",
)


@dataclass(frozen=True)
class InputRecord:
    """Validated inputs for one projection or Monte Carlo run.

    All rates are percentages (``7.0`` means 7%). Balances and the expense
    target are in today's dollars.

    Attributes:
        reference_date: The date the simulation starts from.
        primary_birthdate: Birthdate of the primary spouse. Drives retirement,
            RMD and first-year proration.
        spouse_birthdate: Birthdate of the secondary spouse.
        retirement_age: Primary age at which withdrawals begin.
        max_age: Last primary age simulated.
        taxable_balance: Initial taxable bucket balance.
        tax_deferred_balance: Initial tax-deferred bucket balance.
        annual_expenses: Annual spending target in today's dollars.
        primary_ss_claim_age: Age the primary claims Social Security.
        primary_ss_benefit_at_fra: Primary's annual benefit at FRA.
        spouse_ss_claim_age: Age the spouse claims Social Security.
        spouse_ss_benefit_at_fra: Spouse's own annual benefit at FRA.
        inflation_rate: Annual inflation, percent.
        return_rate: Mean annual portfolio return, percent.
        tax_rate: Flat tax rate, percent.
        return_std_dev: Standard deviation of annual returns, percent.
        simulations: Number of Monte Carlo trials.
        seed: Optional seed for reproducible Monte Carlo runs.
    """
    reference_date: date
    primary_birthdate: date
    spouse_birthdate: date
    retirement_age: float
    max_age: float
    taxable_balance: float
    tax_deferred_balance: float
    annual_expenses: float
    primary_ss_claim_age: float
    primary_ss_benefit_at_fra: float
    spouse_ss_claim_age: float
    spouse_ss_benefit_at_fra: float
    inflation_rate: float
    return_rate: float
    tax_rate: float
    return_std_dev: float = 0.0
    simulations: int = 1000
    seed: Optional[int] = None

    def __post_init__(self):
        for name in _DATE_FIELDS:
            if not isinstance(getattr(self, name), date):
                raise InvalidInputError(f"{name} must be a date")
        for name in ("primary_birthdate", "spouse_birthdate"):
            if getattr(self, name) > self.reference_date:
                raise InvalidInputError(f"{name} must not be after reference_date")
        for name in _NON_NEGATIVE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInputError(f"{name} must be a number")
            if not math.isfinite(value) or value < 0:
                raise InvalidInputError(f"{name} must be a non-negative number, got {value}")
        if self.tax_rate >= 100:
            raise InvalidInputError(f"tax_rate must be below 100, got {self.tax_rate}")
        if isinstance(self.simulations, bool) or not isinstance(self.simulations, int):
            raise InvalidInputError("simulations must be an integer")
        if self.simulations < 1:
            raise InvalidInputError("simulations must be at least 1")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidInputError("seed must be an integer or None")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'InputRecord':
        """Parse an InputRecord from a loosely-typed mapping.

        Args:
            values: Field values keyed by field name or by the calculator form
                    key (see FIELD_ALIASES). Numbers may be strings; dates are
                    ISO ``YYYY-MM-DD`` strings or date objects.

        Returns:
            A validated InputRecord

        Raises:
            InvalidInputError: If a required field is missing, a value does not
                               parse, or a value violates a constraint
        """
        normalized = normalize_keys(values)
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            raw = normalized.get(f.name)
            if f.name in _OPTIONAL_FIELDS:
                if raw is None or (isinstance(raw, str) and not raw.strip()):
                    continue
            elif raw is None:
                raise InvalidInputError(f"Missing required field '{f.name}'")
            try:
                kwargs[f.name] = _FIELD_PARSERS[f.name](raw)
            except (TypeError, ValueError) as e:
                raise InvalidInputError(f"Field '{f.name}' could not be parsed from {raw!r}") from e
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation with ISO dates."""
        data = asdict(self)
        for name in _DATE_FIELDS:
            data[name] = data[name].isoformat()
        return data


_FIELD_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "reference_date": _to_date,
    "primary_birthdate": _to_date,
    "spouse_birthdate": _to_date,
    "retirement_age": _to_float,
    "max_age": _to_float,
    "taxable_balance": _to_float,
    "tax_deferred_balance": _to_float,
    "annual_expenses": _to_float,
    "primary_ss_claim_age": _to_float,
    "primary_ss_benefit_at_fra": _to_float,
    "spouse_ss_claim_age": _to_float,
    "spouse_ss_benefit_at_fra": _to_float,
    "inflation_rate": _to_float,
    "return_rate": _to_float,
    "tax_rate": _to_float,
    "return_std_dev": _to_float,
    "simulations": _to_int,
    "seed": _to_seed,
}

_OPTIONAL_FIELDS = ("return_std_dev", "simulations", "seed")


def canonical_field_name(key: str) -> Optional[str]:
    """Map a field name or form alias to the InputRecord field name."""
    if key in _FIELD_PARSERS:
        return key
    return FIELD_ALIASES.get(key)


def normalize_keys(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename form aliases to field names and drop unrecognized keys."""
    normalized: Dict[str, Any] = {}
    for key, value in values.items():
        name = canonical_field_name(key)
        if name is not None:
            normalized[name] = value
    return normalized


def apply_defaults(values: Mapping[str, Any], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """Override input values with those from an external defaults map.

    Keys that do not name a known field are ignored, as are values that do not
    parse for their field; neither aborts the run.

    Args:
        values: Current field values (field names or form aliases)
        defaults: External key/value map, e.g. loaded from defaults.json

    Returns:
        New dict keyed by field name, with parsed default values applied
    """
    merged = normalize_keys(values)
    for key, raw in defaults.items():
        name = canonical_field_name(key)
        if name is None:
            logger.debug("Ignoring unrecognized default %r", key)
            continue
        try:
            merged[name] = _FIELD_PARSERS[name](raw)
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed default for %s: %r", key, raw)
    return merged


def load_defaults(path: str) -> Tuple[Dict[str, Any], Optional[str]]:
    """Load a JSON defaults document from disk.

    A missing or unreadable source is not an error: the caller proceeds with
    the values it already has and can surface the returned advisory.

    Args:
        path: Path to a JSON file holding a single object

    Returns:
        Tuple of (defaults dict, advisory message or None)
    """
    try:
        with open(path, encoding="utf-8") as fh:
            document = json.load(fh)
    except FileNotFoundError:
        advisory = f"Defaults file not found: {path}"
    except (OSError, ValueError) as e:
        advisory = f"Could not read defaults from {path}: {e}"
    else:
        if isinstance(document, dict):
            return document, None
        advisory = f"Defaults file {path} must contain a JSON object"

    logger.warning(advisory)
    return {}, advisory
