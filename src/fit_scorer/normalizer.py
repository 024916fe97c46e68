"""Response Normalizer - Phase 1 of the Fit Scoring Engine.

Normalizes raw questionnaire answers into a typed, clamped QuizResponse.
Handles the messy reality of form data: numbers as strings, out-of-range
ratings, "yes"/"no" flags and inconsistent choice spellings.
"""

import logging
import math
from typing import Any, Optional, Union

from business_catalog.schema import canonical_choice

from .schema import (
    CHOICE_FIELDS,
    FLAG_FIELDS,
    LIKERT_FIELDS,
    NUMERIC_FIELDS,
    QuizResponse,
    RawQuizResponse,
)

logger = logging.getLogger(__name__)


class ResponseNormalizer:
    """Normalizes raw questionnaire answers into a QuizResponse.

    Value problems are never raised; they are clamped or dropped and
    recorded as warnings.
    """

    LIKERT_MIN = 1
    LIKERT_MAX = 5

    TRUE_STRINGS = {"yes", "y", "true", "t", "1", "sure", "definitely"}
    FALSE_STRINGS = {"no", "n", "false", "f", "0", "not-really", "never"}

    def normalize(self, raw: Union[dict, RawQuizResponse, QuizResponse]) -> QuizResponse:
        """Normalize raw answers into a QuizResponse."""
        response, _ = self.normalize_with_warnings(raw)
        return response

    def normalize_with_warnings(
        self, raw: Union[dict, RawQuizResponse, QuizResponse]
    ) -> tuple[QuizResponse, list[str]]:
        """Normalize raw answers and report every value that was adjusted.

        Returns:
            Tuple of (response, warnings)
        """
        if isinstance(raw, QuizResponse):
            return raw, []

        answers = self._collect_answers(raw)
        warnings: list[str] = []
        values: dict[str, Any] = {}

        for name, alias in LIKERT_FIELDS.items():
            value = self._lookup(answers, name, alias)
            values[name] = self._normalize_likert(name, value, warnings)

        for name, alias in NUMERIC_FIELDS.items():
            value = self._lookup(answers, name, alias)
            values[name] = self._normalize_numeric(name, value, warnings)

        for name, alias in CHOICE_FIELDS.items():
            value = self._lookup(answers, name, alias)
            values[name] = self._normalize_choice(name, value, warnings)

        for name, alias in FLAG_FIELDS.items():
            value = self._lookup(answers, name, alias)
            values[name] = self._normalize_flag(name, value, warnings)

        for warning in warnings:
            logger.warning("Quiz response: %s", warning)

        return QuizResponse(**values), warnings

    def _collect_answers(self, raw: Union[dict, RawQuizResponse, None]) -> dict[str, Any]:
        """Flatten the supported input shapes into one answers dict."""
        if raw is None:
            return {}
        if isinstance(raw, RawQuizResponse):
            answers = dict(raw.answers)
            answers.update(raw.model_extra or {})
            return answers
        if isinstance(raw, dict):
            # Accept both a flat payload and {"answers": {...}}
            nested = raw.get("answers")
            if isinstance(nested, dict) and len(raw) == 1:
                return dict(nested)
            return dict(raw)
        raise TypeError(f"Unsupported quiz response type: {type(raw).__name__}")

    def _lookup(self, answers: dict[str, Any], name: str, alias: str) -> Any:
        """Find a value under its camelCase key, falling back to snake_case."""
        if alias in answers:
            return answers[alias]
        return answers.get(name)

    def _normalize_likert(self, name: str, value: Any, warnings: list[str]) -> Optional[int]:
        """Round and clamp a 1-5 rating; unusable values become unanswered."""
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None

        number = self._to_number(value)
        if number is None:
            warnings.append(f"{name}: ignored non-numeric rating {value!r}")
            return None

        rounded = int(round(number))
        clamped = max(self.LIKERT_MIN, min(self.LIKERT_MAX, rounded))
        if clamped != number:
            warnings.append(f"{name}: rating {value!r} adjusted to {clamped}")
        return clamped

    def _normalize_numeric(self, name: str, value: Any, warnings: list[str]) -> Optional[float]:
        """Parse a non-negative amount; negatives clamp to zero."""
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None

        number = self._to_number(value)
        if number is None:
            warnings.append(f"{name}: ignored non-numeric value {value!r}")
            return None

        if number < 0:
            warnings.append(f"{name}: negative value {value!r} clamped to 0")
            return 0.0
        return number

    def _normalize_choice(self, name: str, value: Any, warnings: list[str]) -> Optional[str]:
        """Canonicalize an enumerated answer: lowercase, hyphen-separated."""
        if value is None:
            return None
        if not isinstance(value, str):
            warnings.append(f"{name}: ignored non-text choice {value!r}")
            return None

        return canonical_choice(value) or None

    def _normalize_flag(self, name: str, value: Any, warnings: list[str]) -> Optional[bool]:
        """Map yes/no style answers to bool."""
        if value is None:
            return None
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            text = canonical_choice(value)
            if text in self.TRUE_STRINGS:
                return True
            if text in self.FALSE_STRINGS:
                return False
            if not text:
                return None

        warnings.append(f"{name}: ignored unrecognized yes/no answer {value!r}")
        return None

    def _to_number(self, value: Any) -> Optional[float]:
        """Parse ints, floats and numeric strings; reject bools and non-finite values."""
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            text = value.strip().replace(",", "").lstrip("$")
            if not text:
                return None
            try:
                number = float(text)
            except ValueError:
                return None
        else:
            return None

        if not math.isfinite(number):
            return None
        return number


def normalize_response(raw: Union[dict, RawQuizResponse, QuizResponse]) -> QuizResponse:
    """Normalize raw answers with a default normalizer."""
    return ResponseNormalizer().normalize(raw)
