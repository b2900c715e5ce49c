"""
Validation Prompts - Templates for the cross-validation analysis pass.
"""

from __future__ import annotations

__all__ = ["build_comparison_prompt", "build_validation_prompt"]

VALIDATION_PROMPT = """You are an expert data validation specialist focused on {document_type} document analysis.

**TASK**: Cross-validate data extracted from a document against reference data supplied by the caller.

**DOCUMENT TYPE**: {document_type}
**FIELDS TO VALIDATE**: {fields}

**REFERENCE DATA (JSON)**:
{reference_json}

**VALIDATION CRITERIA**:

1. **Accuracy Verification**:
   - Compare every extracted value with the matching reference value
   - Identify transcription errors and conflicting values

2. **Format Compliance**:
   - Treat formatting differences (dates, numbers, capitalization) as format issues, not mismatches

3. **Completeness Assessment**:
   - Flag reference fields that do not appear in the extracted data
   - Flag partial extractions

**VALIDATION FOCUS AREAS**:
- Critical identifiers (IDs, names, numbers)
- Financial data (amounts, totals)
- Dates and temporal information
- Contact and address details"""

COMPARISON_PROMPT = """**EXTRACTED DATA FROM DOCUMENT:**
{extracted_data}

**VALIDATION INSTRUCTIONS:**
{validation_prompt}

**ANALYSIS REQUIREMENTS:**
1. Analyze the extracted data for completeness and accuracy
2. Identify any missing or inconsistent information
3. Consider variations in formatting, spelling, or representation
4. Provide a confidence score (0.0 to 1.0) for the overall validation
5. List specific issues with severity levels

**RESPONSE FORMAT:**
Provide your analysis in the following JSON format:
{{
  "isValid": boolean,
  "confidenceScore": number,
  "analysis": "detailed analysis text",
  "discrepancies": [
    {{
      "field": "field name",
      "extractedValue": "value from document",
      "providedValue": "value from JSON",
      "discrepancyType": "mismatch|missing|format|other",
      "description": "detailed description",
      "severity": number (0.0 to 1.0)
    }}
  ]
}}"""


def build_validation_prompt(
    document_type: str,
    fields_to_validate: list[str] | None,
    reference_json: str,
) -> str:
    """Base validation instructions with the caller's reference data."""
    fields = ", ".join(fields_to_validate) if fields_to_validate else "all available fields"
    return VALIDATION_PROMPT.format(
        document_type=document_type,
        fields=fields,
        reference_json=reference_json,
    )


def build_comparison_prompt(extracted_data: str, validation_prompt: str) -> str:
    """Final prompt sent to the analysis provider."""
    return COMPARISON_PROMPT.format(
        extracted_data=extracted_data,
        validation_prompt=validation_prompt,
    )
