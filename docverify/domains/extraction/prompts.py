"""
Extraction Prompts - Template for the vision extraction pass.
"""

from __future__ import annotations

__all__ = ["build_extraction_prompt"]

EXTRACTION_PROMPT = """You are an expert document analysis AI specialized in extracting structured data from {document_type} documents.

**TASK**: Extract all relevant information from this document with high accuracy and attention to detail.

**DOCUMENT TYPE**: {document_type}

**EXTRACTION GUIDELINES**:
1. **Accuracy First**: Extract exactly what you see - do not interpret, assume, or fill in missing information
2. **Structured Output**: Organize data logically with clear field names
3. **Data Types**: Preserve original formatting (dates, numbers, text)
4. **Completeness**: Extract all visible text, forms, tables, and structured information
5. **Quality Control**: Double-check critical fields like names, dates, amounts, and IDs

**SPECIAL ATTENTION TO**:
- Names and personal identifiers
- Dates and timestamps
- Monetary amounts and numbers
- Addresses and contact information
- Document numbers and references
- Signatures and stamps
- Tables and structured data

**OUTPUT FORMAT**:
Provide extracted data in clear, structured JSON format:

{{
  "documentType": "{document_type}",
  "extractedFields": {{
    "fieldName": "extracted value",
    "anotherField": "another value"
  }},
  "tables": [
    {{
      "tableName": "description",
      "headers": ["col1", "col2"],
      "rows": [["data1", "data2"]]
    }}
  ],
  "metadata": {{
    "confidence": "high|medium|low",
    "documentQuality": "clear|moderate|poor",
    "extractionNotes": "any relevant observations"
  }}
}}"""

PRIORITY_FIELDS = """

**PRIORITY FIELDS** (focus extraction on these specific fields):
{fields}

Ensure these priority fields are extracted with maximum accuracy and detail."""


def build_extraction_prompt(
    document_type: str,
    fields_to_extract: list[str] | None = None,
) -> str:
    """Vision prompt, with a priority section when fields are given."""
    prompt = EXTRACTION_PROMPT.format(document_type=document_type)
    if fields_to_extract:
        prompt += PRIORITY_FIELDS.format(fields=", ".join(fields_to_extract))
    return prompt
