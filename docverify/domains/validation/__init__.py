"""
Validation Domain - Cross-validation of extracted data.

This domain handles:
- Comparison prompt construction
- Analysis provider invocation with fallback
- Strict parsing of model verdicts and discrepancies
"""

from .contracts import Validator
from .models import (
    Discrepancy,
    DiscrepancyType,
    ParsedAnalysis,
    ParsedExtraction,
    ParseError,
    ValidationResult,
)
from .parser import ResponseParser
from .prompts import build_comparison_prompt, build_validation_prompt
from .validator import ValidationOrchestrator

__all__ = [
    # Contracts
    "Validator",
    # Models
    "ValidationResult",
    "Discrepancy",
    "DiscrepancyType",
    "ParsedAnalysis",
    "ParsedExtraction",
    "ParseError",
    # Implementations
    "ResponseParser",
    "ValidationOrchestrator",
    "build_validation_prompt",
    "build_comparison_prompt",
]
