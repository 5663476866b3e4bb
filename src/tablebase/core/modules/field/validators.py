"""Value validator implementations using ABC pattern.

Each field type that accepts client values maps to exactly one validator in
``_VALIDATORS``. Types missing from the table (AUTHOR and the CREATED_* system
types) accept no client values at all.
"""

from abc import ABC, abstractmethod
from typing import Any

from tablebase.core.modules.field.models import FieldType
from tablebase.errors import UnsupportedTypeError, ValidationError

SINGLE_LINE_MAX_LENGTH = 255


class ValueValidator(ABC):
    """Abstract base class for value validators."""

    @abstractmethod
    def validate(self, field_type: FieldType, value: Any) -> None:
        """Check that a non-null JSON value has the shape the field type requires.

        Args:
            field_type: The type of the field being written
            value: The decoded JSON value, never None

        Raises:
            ValidationError: If the value has the wrong shape
        """


class NumberValidator(ValueValidator):
    """Validator for numeric fields."""

    def validate(self, field_type: FieldType, value: Any) -> None:
        # bool is an int subclass but JSON true/false is not a number
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValidationError(f"Value for {field_type} field must be a number, got {type(value).__name__}")


class BooleanValidator(ValueValidator):
    """Validator for checkbox fields."""

    def validate(self, field_type: FieldType, value: Any) -> None:
        if not isinstance(value, bool):
            raise ValidationError(f"Value for {field_type} field must be a boolean, got {type(value).__name__}")


class StringValidator(ValueValidator):
    """Validator for string-shaped fields: text and single references."""

    def __init__(self, description: str = "a string", max_length: int | None = None) -> None:
        self.description = description
        self.max_length = max_length

    def validate(self, field_type: FieldType, value: Any) -> None:
        if not isinstance(value, str):
            raise ValidationError(f"Value for {field_type} field must be {self.description}, got {type(value).__name__}")
        if self.max_length is not None and len(value) > self.max_length:
            raise ValidationError(f"Value for {field_type} field must be <= {self.max_length} characters, got {len(value)}")


class StringListValidator(ValueValidator):
    """Validator for multi-value reference fields."""

    def __init__(self, description: str) -> None:
        self.description = description

    def validate(self, field_type: FieldType, value: Any) -> None:
        if not isinstance(value, list):
            raise ValidationError(f"Value for {field_type} field must be an array of {self.description}")
        for item in value:
            if not isinstance(item, str):
                raise ValidationError(
                    f"Value for {field_type} field must be an array of {self.description}, "
                    f"got element of type {type(item).__name__}"
                )


# Map field types to validators
_VALIDATORS: dict[FieldType, ValueValidator] = {
    FieldType.NUMBER: NumberValidator(),
    FieldType.NAME: StringValidator(max_length=SINGLE_LINE_MAX_LENGTH),
    FieldType.SINGLE_LINE_TEXT: StringValidator(max_length=SINGLE_LINE_MAX_LENGTH),
    FieldType.LONG_TEXT: StringValidator(),
    FieldType.CHECKBOX: BooleanValidator(),
    FieldType.SINGLE_SELECT: StringValidator("a string (option id or name)"),
    FieldType.MULTI_SELECT: StringListValidator("strings (option ids or names)"),
    FieldType.SINGLE_USER: StringValidator("a string (user id)"),
    FieldType.MULTI_USER: StringListValidator("strings (user ids)"),
    FieldType.SINGLE_LINK: StringValidator("a string (record id)"),
    FieldType.MULTI_LINK: StringListValidator("strings (record ids)"),
}


def is_writable_type(field_type: FieldType | str) -> bool:
    """Whether clients can write values to fields of this type."""
    return field_type in _VALIDATORS


def validate_value(value: Any, field_type: FieldType | str) -> None:
    """Validate a JSON value against a field type.

    None is accepted for every type and means "unset".

    Raises:
        UnsupportedTypeError: If the type accepts no client values or is unknown
        ValidationError: If the value shape does not match the type
    """
    if value is None:
        return

    validator = _VALIDATORS.get(field_type)  # type: ignore[call-overload]
    if validator is None:
        raise UnsupportedTypeError(f"Unsupported field type: {field_type}")
    validator.validate(FieldType(field_type), value)
