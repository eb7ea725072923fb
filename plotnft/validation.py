"""
PlotNFT Field Validation

Input validators for plot metadata. Every validator returns a
``ValidationResult``; the registry maps an invalid result onto the matching
``ErrorCode`` and leaves its state untouched.

Rules:
    location          non-empty string, at most 100 characters
    species           non-empty string, at most 50 characters
    coordinates       lat in [-90, 90], long in [-180, 180]
    tree_count        integer in [1, 10000]
    plant_date        integer block height in [0, current height]
    carbon_estimate   finite decimal >= 0
    partner_id        integer > 0

Strings are checked as given (no stripping), so a whitespace-only location
counts as non-empty.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional

from plotnft.records import Coordinates


# =============================================================================
# VALIDATION ERROR TYPES
# =============================================================================

class ValidationError(Exception):
    """A single field validation failure."""

    def __init__(self, field: str, message: str, value: Any = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"{field}: {message}")


class ValidationErrors(Exception):
    """Collection of validation errors."""

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        messages = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Validation failed: {messages}")


# =============================================================================
# VALIDATION RESULT
# =============================================================================

@dataclass
class ValidationResult:
    """Result of a validation operation."""
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    sanitized_value: Any = None

    def raise_if_invalid(self) -> None:
        """Raise ValidationErrors if validation failed."""
        if not self.is_valid:
            raise ValidationErrors(self.errors)

    @classmethod
    def success(cls, sanitized_value: Any = None) -> "ValidationResult":
        return cls(is_valid=True, sanitized_value=sanitized_value)

    @classmethod
    def failure(cls, errors: List[ValidationError]) -> "ValidationResult":
        return cls(is_valid=False, errors=errors)

    @classmethod
    def single(cls, field_name: str, message: str, value: Any) -> "ValidationResult":
        return cls.failure([ValidationError(field_name, message, value)])


# =============================================================================
# INPUT VALIDATORS
# =============================================================================

class Validators:
    """Collection of plot field validators."""

    MAX_LOCATION_LENGTH = 100
    MAX_SPECIES_LENGTH = 50
    MAX_PRINCIPAL_LENGTH = 256
    MIN_TREE_COUNT = 1
    MAX_TREE_COUNT = 10000
    LAT_RANGE = (Decimal("-90"), Decimal("90"))
    LONG_RANGE = (Decimal("-180"), Decimal("180"))

    @classmethod
    def validate_string(
        cls,
        value: Any,
        field_name: str,
        min_length: int = 1,
        max_length: Optional[int] = None,
    ) -> ValidationResult:
        """Validate a string value by length."""
        if not isinstance(value, str):
            return ValidationResult.single(
                field_name, f"Expected string, got {type(value).__name__}", value
            )

        errors = []
        if len(value) < min_length:
            errors.append(ValidationError(field_name, f"Too short (min {min_length} chars)", value))
        if max_length is not None and len(value) > max_length:
            errors.append(ValidationError(field_name, f"Too long (max {max_length} chars)", value))

        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success(value)

    @classmethod
    def validate_integer(
        cls,
        value: Any,
        field_name: str,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> ValidationResult:
        """Validate an integer within optional bounds. Booleans are rejected."""
        if isinstance(value, bool) or not isinstance(value, int):
            return ValidationResult.single(
                field_name, f"Expected integer, got {type(value).__name__}", value
            )

        errors = []
        if min_value is not None and value < min_value:
            errors.append(ValidationError(field_name, f"Below minimum ({min_value})", value))
        if max_value is not None and value > max_value:
            errors.append(ValidationError(field_name, f"Exceeds maximum ({max_value})", value))

        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success(value)

    @classmethod
    def validate_decimal(
        cls,
        value: Any,
        field_name: str,
        min_value: Optional[Decimal] = None,
        max_value: Optional[Decimal] = None,
    ) -> ValidationResult:
        """Validate a finite decimal number within optional bounds."""
        if isinstance(value, bool):
            return ValidationResult.single(field_name, "Expected number, got bool", value)

        try:
            if isinstance(value, Decimal):
                number = value
            elif isinstance(value, (int, float)):
                number = Decimal(str(value))
            elif isinstance(value, str):
                number = Decimal(value)
            else:
                return ValidationResult.single(
                    field_name, f"Cannot convert {type(value).__name__} to Decimal", value
                )
        except InvalidOperation:
            return ValidationResult.single(field_name, "Invalid decimal value", value)

        if not number.is_finite():
            return ValidationResult.single(field_name, "Must be a finite number", value)

        errors = []
        if min_value is not None and number < min_value:
            errors.append(ValidationError(field_name, f"Below minimum ({min_value})", value))
        if max_value is not None and number > max_value:
            errors.append(ValidationError(field_name, f"Exceeds maximum ({max_value})", value))

        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success(number)

    @classmethod
    def validate_location(cls, value: Any) -> ValidationResult:
        return cls.validate_string(value, "location", max_length=cls.MAX_LOCATION_LENGTH)

    @classmethod
    def validate_species(cls, value: Any) -> ValidationResult:
        return cls.validate_string(value, "species", max_length=cls.MAX_SPECIES_LENGTH)

    @classmethod
    def validate_coordinates(cls, value: Any) -> ValidationResult:
        """
        Validate a coordinate pair.

        Accepts a ``Coordinates`` instance, a mapping with ``lat`` and
        ``long`` keys, or a ``(lat, long)`` pair. The sanitized value is
        always a ``Coordinates``.
        """
        if isinstance(value, Coordinates):
            lat, long = value.lat, value.long
        elif isinstance(value, Mapping):
            if "lat" not in value or "long" not in value:
                return ValidationResult.single("coordinates", "Missing lat or long", value)
            lat, long = value["lat"], value["long"]
        elif isinstance(value, (tuple, list)) and len(value) == 2:
            lat, long = value
        else:
            return ValidationResult.single(
                "coordinates", f"Unsupported coordinates type {type(value).__name__}", value
            )

        lat_result = cls.validate_decimal(lat, "coordinates.lat", *cls.LAT_RANGE)
        long_result = cls.validate_decimal(long, "coordinates.long", *cls.LONG_RANGE)
        errors = lat_result.errors + long_result.errors
        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success(
            Coordinates(lat=lat_result.sanitized_value, long=long_result.sanitized_value)
        )

    @classmethod
    def validate_tree_count(cls, value: Any) -> ValidationResult:
        return cls.validate_integer(
            value, "tree_count", min_value=cls.MIN_TREE_COUNT, max_value=cls.MAX_TREE_COUNT
        )

    @classmethod
    def validate_block_height(cls, value: Any, field_name: str = "block_height") -> ValidationResult:
        return cls.validate_integer(value, field_name, min_value=0)

    @classmethod
    def validate_plant_date(cls, value: Any, block_height: int) -> ValidationResult:
        """A plant date is a block height no later than the current one."""
        return cls.validate_integer(value, "plant_date", min_value=0, max_value=block_height)

    @classmethod
    def validate_carbon_estimate(cls, value: Any) -> ValidationResult:
        return cls.validate_decimal(value, "carbon_estimate", min_value=Decimal("0"))

    @classmethod
    def validate_partner_id(cls, value: Any) -> ValidationResult:
        return cls.validate_integer(value, "partner_id", min_value=1)

    @classmethod
    def validate_principal(cls, value: Any, field_name: str = "principal") -> ValidationResult:
        return cls.validate_string(value, field_name, max_length=cls.MAX_PRINCIPAL_LENGTH)
