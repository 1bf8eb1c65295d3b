"""Result and format types.

``ConversionResult`` serializes with camelCase aliases
(``tokenCount``, ``inputTokenEstimate``) so JSON output matches the
record shape consumers expect.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .utils.errors import UnsupportedFormatError

__all__ = [
    "InputFormat",
    "FORMAT_LABELS",
    "ConversionResult",
    "ConversionStats",
]


class InputFormat(str, Enum):
    """Supported input formats. ``AUTO`` is only valid in requests."""

    JSON = "json"
    YAML = "yaml"
    HTML = "html"
    REACT = "react"
    TEXT = "text"
    AUTO = "auto"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: InputFormat | str) -> InputFormat:
        """Coerce a case-insensitive name to a member."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(value) from None


# Used in error lines: "ERROR Invalid <label>: ..."
FORMAT_LABELS: dict[InputFormat, str] = {
    InputFormat.JSON: "JSON",
    InputFormat.YAML: "YAML",
    InputFormat.HTML: "HTML",
    InputFormat.REACT: "component source",
    InputFormat.TEXT: "Plain Text",
}


class ConversionStats(BaseModel):
    """Input/output token comparison for one conversion."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    input_tokens: int = Field(alias="inputTokens")
    output_tokens: int = Field(alias="outputTokens")
    savings: int
    savings_percentage: int = Field(alias="savingsPercentage")


class ConversionResult(BaseModel):
    """Outcome of a single ``convert`` call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tokens: str = Field(description="Newline-joined notation lines")
    token_count: int = Field(alias="tokenCount", ge=0, description="Estimated tokens of the notation")
    input_token_estimate: int = Field(alias="inputTokenEstimate", ge=0, description="Estimated tokens of the raw input")
    format: InputFormat = Field(description="Resolved (never auto) input format")

    @property
    def is_error(self) -> bool:
        return self.tokens.startswith("ERROR ")

    def stats(self) -> ConversionStats:
        savings = self.input_token_estimate - self.token_count
        pct = round(savings / self.input_token_estimate * 100) if self.input_token_estimate else 0
        return ConversionStats(
            input_tokens=self.input_token_estimate,
            output_tokens=self.token_count,
            savings=savings,
            savings_percentage=pct,
        )

    def to_record(self) -> dict:
        """Plain dict with camelCase keys and the format as a string."""
        return self.model_dump(by_alias=True, mode="json")
