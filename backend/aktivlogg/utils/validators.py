"""Validation utilities for the application."""
from typing import Any, Dict, List

class Validator:
    """Validation helper class."""

    @staticmethod
    def validate_name(name: str) -> Dict[str, Any]:
        """Validate a location name."""
        errors = []

        if name is not None and not isinstance(name, str):
            errors.append("Name must be text")
        elif not name or not name.strip():
            errors.append("Name is required")
        elif len(name.strip()) < 2:
            errors.append("Name must be at least 2 characters long")
        elif len(name.strip()) > 100:
            errors.append("Name is too long")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_required_fields(data: Dict, required_fields: List[str]) -> Dict[str, Any]:
        """Validate required fields in data."""
        errors = []

        for field in required_fields:
            if field not in data or data[field] in (None, ''):
                errors.append(f"{field} is required")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_duration(value: Any) -> Dict[str, Any]:
        """Duration in minutes must be a positive whole number when given."""
        errors = []

        if value is not None:
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append("duration_minutes must be an integer")
            elif value <= 0:
                errors.append("duration_minutes must be positive")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_types(data: Dict, expected: Dict[str, type]) -> Dict[str, Any]:
        """Fields present in data must have the expected JSON type (null allowed)."""
        errors = []

        for field, field_type in expected.items():
            value = data.get(field)
            if value is not None and not isinstance(value, field_type):
                errors.append(f"{field} must be of type {field_type.__name__}")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }
