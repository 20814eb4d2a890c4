"""Argument validation for tool calls.

Each tool declares a pydantic model for its arguments. ``RequestValidator``
parses the untyped argument mapping sent by the host into that model and
returns a tagged result: ``Valid`` with a fully populated argument record
(optional fields default-filled), or ``Invalid`` with one violation per
offending field. Field names in violations use the wire names
(``analysisType``, ``images.0.data``) so the host can point at them.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ToolValidationError, UnknownToolError
from .tabular import SUPPORTED_EXTENSIONS, file_format


class ToolArguments(BaseModel):
    """Base class for tool argument records."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    def with_defaults(self, default_output_dir: Path) -> "ToolArguments":
        """Return a copy with process-level defaults filled in."""
        return self


class GenerateThinkingArgs(ToolArguments):
    prompt: str = Field(description="Prompt for generating thinking process text")
    output_dir: str | None = Field(
        default=None, alias="outputDir", description="Directory to save output responses"
    )

    def with_defaults(self, default_output_dir: Path) -> "GenerateThinkingArgs":
        target = Path(self.output_dir) if self.output_dir else default_output_dir
        return self.model_copy(update={"output_dir": str(target.resolve())})


class ImageInput(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(description="Image filename")
    data: str = Field(
        description="Base64 encoded image data with mime type (data:image/jpeg;base64,...)"
    )


class SendEmailArgs(ToolArguments):
    to: str = Field(description="Recipient email address")
    subject_prompt: str = Field(
        alias="subjectPrompt", description="Prompt for Gemini to generate email subject"
    )
    text: str = Field(description="Plain text version of the email")
    html: str | None = Field(default=None, description="HTML version of the email")
    images: list[ImageInput] = Field(
        default_factory=list, description="Images to attach to the email"
    )


class AnalyzeDataArgs(ToolArguments):
    file_data: str = Field(alias="fileData", description="Base64 encoded file data")
    file_name: str = Field(
        alias="fileName", description="Name of the file (must be .xlsx, .xls, or .csv)"
    )
    analysis_type: Literal["basic", "detailed"] = Field(
        alias="analysisType", description="Type of analysis to perform"
    )
    output_dir: str | None = Field(
        default=None, alias="outputDir", description="Directory to save analysis results"
    )

    @field_validator("file_data")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        # tolerate a data-uri prefix and line-wrapped payloads
        if value.startswith("data:") and "," in value:
            value = value.split(",", 1)[1]
        payload = "".join(value.split())
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("must be base64 encoded file content") from None
        return payload

    @field_validator("file_name")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        if not file_format(value):
            raise ValueError(
                f"unsupported file type, expected one of {', '.join(SUPPORTED_EXTENSIONS)}"
            )
        return value

    @property
    def file_bytes(self) -> bytes:
        return base64.b64decode(self.file_data)

    def with_defaults(self, default_output_dir: Path) -> "AnalyzeDataArgs":
        target = Path(self.output_dir) if self.output_dir else default_output_dir / "analysis"
        return self.model_copy(update={"output_dir": str(target.resolve())})


ARGUMENT_MODELS: dict[str, type[ToolArguments]] = {
    "generate-thinking": GenerateThinkingArgs,
    "send-email": SendEmailArgs,
    "analyze-data": AnalyzeDataArgs,
}


@dataclass(frozen=True)
class FieldViolation:
    """One problem with one argument field."""
    field: str
    message: str


@dataclass(frozen=True)
class Valid:
    arguments: ToolArguments
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Invalid:
    tool_name: str
    violations: tuple[FieldViolation, ...]
    ok: ClassVar[bool] = False

    def to_error(self) -> ToolValidationError:
        return ToolValidationError(self.tool_name, self.violations)


ValidationResult = Union[Valid, Invalid]


def _violations(error: ValidationError) -> tuple[FieldViolation, ...]:
    violations = []
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or "arguments"
        violations.append(FieldViolation(field=path, message=item["msg"]))
    return tuple(violations)


class RequestValidator:
    """Parses raw tool arguments into typed records.

    Args:
        default_output_dir: Directory used when a call gives no outputDir
    """

    def __init__(self, default_output_dir: Path):
        self.default_output_dir = Path(default_output_dir)

    def validate(self, tool_name: str, raw_arguments: Any) -> ValidationResult:
        """Validate ``raw_arguments`` against the model of ``tool_name``.

        Raises:
            UnknownToolError: If no model is registered under ``tool_name``
        """
        model = ARGUMENT_MODELS.get(tool_name)
        if model is None:
            raise UnknownToolError(tool_name)

        if raw_arguments is None:
            raw_arguments = {}
        if not isinstance(raw_arguments, Mapping):
            return Invalid(tool_name, (
                FieldViolation("arguments", f"expected an object, got {type(raw_arguments).__name__}"),
            ))

        try:
            arguments = model.model_validate(dict(raw_arguments))
        except ValidationError as e:
            return Invalid(tool_name, _violations(e))

        return Valid(arguments.with_defaults(self.default_output_dir))
