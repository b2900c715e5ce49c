"""
Response Parser - Decode AI responses into validated models.

Model output is untrusted. The parser accepts bare JSON, fenced JSON and
JSON embedded in prose, checks required fields and types, clamps
out-of-range numbers to 0.0 with a warning, and never raises: every failure
comes back as a ParseError that keeps the raw text.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from .models import (
    Discrepancy,
    DiscrepancyType,
    ParsedAnalysis,
    ParsedExtraction,
    ParseError,
)

logger = logging.getLogger(__name__)

__all__ = ["ResponseParser"]

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


def _as_text(value: Any) -> str:
    """Render a JSON value as display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _unit_interval(value: Any, name: str, warnings: list[str]) -> float:
    """Coerce to [0, 1]; anything else becomes 0.0 with a warning."""
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        warnings.append(f"{name} is not a number ({value!r}); using 0.0")
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if math.isnan(number) or not 0.0 <= number <= 1.0:
        warnings.append(f"{name} {value!r} is outside [0, 1]; using 0.0")
        return 0.0
    return number


class ResponseParser:
    """
    Parser for analysis and extraction responses.

    Example:
        >>> parser = ResponseParser()
        >>> result = parser.parse('{"isValid": true, "analysis": "ok"}')
        >>> result.is_valid
        True
    """

    def _decode(self, raw_text: str) -> dict[str, Any] | ParseError:
        """Locate and decode the JSON object in a response."""
        text = (raw_text or "").strip()
        if not text:
            return ParseError(reason="Response is empty", raw_text=raw_text or "")

        # Fenced blocks in order, then the whole text
        candidates = [m.group(1).strip() for m in _FENCE_RE.finditer(text)]
        candidates.append(text)

        error: ParseError | None = None
        for candidate in candidates:
            decoded = self._decode_candidate(candidate, raw_text)
            if not isinstance(decoded, ParseError):
                return decoded
            error = error or decoded
        return error

    def _decode_candidate(self, text: str, raw_text: str) -> dict[str, Any] | ParseError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            return ParseError(reason="Response contains no JSON object", raw_text=raw_text)

        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            return ParseError(reason=f"Response is not valid JSON: {e.msg}", raw_text=raw_text)
        except (ValueError, RecursionError) as e:
            # Integer digit limit, or nesting too deep
            return ParseError(reason=f"Response is not decodable JSON: {e}", raw_text=raw_text)

        if not isinstance(data, dict):
            return ParseError(reason="Response JSON is not an object", raw_text=raw_text)
        return data

    def _parse_discrepancy(
        self,
        index: int,
        item: Any,
        warnings: list[str],
    ) -> Discrepancy | None:
        if not isinstance(item, dict):
            warnings.append(f"discrepancies[{index}] is not an object; skipped")
            return None

        return Discrepancy(
            field=_as_text(item.get("field")),
            extracted_value=_as_text(item.get("extractedValue")),
            provided_value=_as_text(item.get("providedValue")),
            discrepancy_type=DiscrepancyType.from_value(item.get("discrepancyType")),
            description=_as_text(item.get("description")),
            severity=_unit_interval(
                item.get("severity"), f"discrepancies[{index}].severity", warnings
            ),
        )

    def parse(self, raw_text: str) -> ParsedAnalysis | ParseError:
        """
        Parse a validation analysis response.

        Args:
            raw_text: Raw model output

        Returns:
            ParsedAnalysis, or ParseError naming what was wrong
        """
        data = self._decode(raw_text)
        if isinstance(data, ParseError):
            logger.warning("Analysis response rejected: %s", data.reason)
            return data

        missing = [name for name in ("isValid", "analysis") if name not in data]
        if missing:
            logger.warning("Analysis response missing fields: %s", missing)
            return ParseError(
                reason=f"Missing required field(s): {', '.join(missing)}",
                fields=missing,
                raw_text=raw_text,
            )

        type_errors = []
        if not isinstance(data["isValid"], bool):
            type_errors.append(("isValid", "boolean"))
        if not isinstance(data["analysis"], str):
            type_errors.append(("analysis", "string"))
        if type_errors:
            return ParseError(
                reason="; ".join(f"Field '{name}' must be a {kind}" for name, kind in type_errors),
                fields=[name for name, _ in type_errors],
                raw_text=raw_text,
            )

        warnings: list[str] = []
        confidence = _unit_interval(data.get("confidenceScore"), "confidenceScore", warnings)

        discrepancies: list[Discrepancy] = []
        items = data.get("discrepancies")
        if items is not None and not isinstance(items, list):
            warnings.append("discrepancies is not a list; ignored")
        elif items:
            for index, item in enumerate(items):
                discrepancy = self._parse_discrepancy(index, item, warnings)
                if discrepancy is not None:
                    discrepancies.append(discrepancy)

        for warning in warnings:
            logger.warning("Analysis response: %s", warning)

        return ParsedAnalysis(
            is_valid=data["isValid"],
            confidence_score=confidence,
            analysis=data["analysis"],
            discrepancies=discrepancies,
            warnings=warnings,
            raw_text=raw_text,
        )

    def parse_extraction(self, raw_text: str) -> ParsedExtraction | ParseError:
        """
        Parse a vision extraction response.

        Args:
            raw_text: Raw model output

        Returns:
            ParsedExtraction, or ParseError when extractedFields is absent
            or not an object
        """
        data = self._decode(raw_text)
        if isinstance(data, ParseError):
            return data

        fields = data.get("extractedFields")
        if fields is None:
            return ParseError(
                reason="Missing required field(s): extractedFields",
                fields=["extractedFields"],
                raw_text=raw_text,
            )
        if not isinstance(fields, dict):
            return ParseError(
                reason="Field 'extractedFields' must be an object",
                fields=["extractedFields"],
                raw_text=raw_text,
            )

        warnings: list[str] = []
        tables = data.get("tables") or []
        if not isinstance(tables, list):
            warnings.append("tables is not a list; ignored")
            tables = []
        kept_tables = [t for t in tables if isinstance(t, dict)]
        if len(kept_tables) != len(tables):
            warnings.append(f"{len(tables) - len(kept_tables)} table(s) were not objects; skipped")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            warnings.append("metadata is not an object; ignored")
            metadata = {}

        return ParsedExtraction(
            document_type=_as_text(data.get("documentType")),
            extracted_fields=fields,
            tables=kept_tables,
            confidence=_as_text(metadata.get("confidence")),
            document_quality=_as_text(metadata.get("documentQuality")),
            extraction_notes=_as_text(metadata.get("extractionNotes")),
            warnings=warnings,
            raw_text=raw_text,
        )
