"""
Validation Contracts - Interfaces for the validation domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ValidationResult


@runtime_checkable
class Validator(Protocol):
    """
    Contract for the analysis phase.

    Example:
        >>> class MyValidator:
        ...     async def validate(self, extracted_data, document_type, fields, reference_json):
        ...         ...
        >>> assert isinstance(MyValidator(), Validator)
    """

    async def validate(
        self,
        extracted_data: str,
        document_type: str,
        fields_to_validate: list[str] | None,
        reference_json: str,
    ) -> ValidationResult:
        """
        Cross-validate extracted data against reference JSON.

        Args:
            extracted_data: Extraction phase output
            document_type: Document type label
            fields_to_validate: Fields to focus on
            reference_json: Caller-supplied reference data

        Returns:
            Validation result
        """
        ...
