"""Validation and sanitization of Product Requirements Prompt (PRP) content."""

import re

from project_master.tasks.models import ValidationResult

MIN_CONTENT_LENGTH = 50
MAX_CONTENT_LENGTH = 50_000

IMPLEMENTATION_KEYWORDS = (
    "implement",
    "create",
    "build",
    "code",
    "function",
    "class",
    "component",
    "api",
    "test",
    "validate",
)

EMPTY_CONTENT_ERROR = "PRP content cannot be empty"
TOO_SHORT_ERROR = "PRP content is too short to be meaningful"
TOO_LONG_ERROR = "PRP content exceeds maximum length of 50,000 characters"
NO_IMPLEMENTATION_CONTEXT_ERROR = (
    "PRP content should contain implementation instructions, code patterns, "
    "or technical specifications"
)

_ANGLE_BRACKETS = re.compile(r"[<>]")
_QUOTES = re.compile(r"['\"]")


class ContentValidator:
    """
    Gate PRP content before it reaches task generation.

    Example:
        >>> ContentValidator().validate_content("Short").is_valid
        False
    """

    def validate_content(self, content: str | None) -> ValidationResult:
        """
        Validate PRP content.

        Args:
            content: Raw requirement text.

        Returns:
            ValidationResult with every applicable error.
        """
        content = content or ""
        errors: list[str] = []

        if not content.strip():
            errors.append(EMPTY_CONTENT_ERROR)

        if len(content) < MIN_CONTENT_LENGTH:
            errors.append(TOO_SHORT_ERROR)

        if len(content) > MAX_CONTENT_LENGTH:
            errors.append(TOO_LONG_ERROR)

        content_lower = content.lower()
        if not any(keyword in content_lower for keyword in IMPLEMENTATION_KEYWORDS):
            errors.append(NO_IMPLEMENTATION_CONTEXT_ERROR)

        return ValidationResult.from_errors(errors)

    @staticmethod
    def sanitize(content: str) -> str:
        """
        Sanitize PRP content for processing.

        Angle brackets are dropped (tag names stay as bare text), single and
        double quotes become double quotes, and surrounding whitespace is
        trimmed. Applying it twice gives the same result as once.

        Example:
            >>> ContentValidator.sanitize("  <b>Use 'quotes'</b> ")
            'bUse "quotes"/b'
        """
        content = _ANGLE_BRACKETS.sub("", content)
        content = _QUOTES.sub('"', content)
        return content.strip()


def validate_prp_content(content: str | None) -> ValidationResult:
    """Convenience function to validate PRP content."""
    return ContentValidator().validate_content(content)


def sanitize_prp_content(content: str) -> str:
    """Convenience function to sanitize PRP content."""
    return ContentValidator.sanitize(content)
