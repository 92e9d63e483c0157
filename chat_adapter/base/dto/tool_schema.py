"""
Tool definition DTO.

Purpose
-------
Validate caller-supplied tool definitions at the boundary. The schema body is
owned by the caller and passed through to the vendor unmodified; only the
envelope (non-empty name, object-typed input schema) is checked here.

External dependencies: Pydantic v2 only.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToolSchema(BaseModel):
    """A tool the model may call.

    Attributes:
        name: Tool name the model will reference in tool-use blocks.
        description: Human-readable description shown to the model.
        input_schema: JSON Schema object describing the tool arguments.

    Raises:
        pydantic.ValidationError: On an empty name or a non-mapping schema.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    input_schema: Dict[str, Any] = Field(default_factory=lambda: {"type": "object"}, alias="parameters")

    @field_validator("input_schema")
    @classmethod
    def _schema_is_object(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        if value.get("type", "object") != "object":
            raise ValueError("input_schema must describe a JSON object")
        return value

    @classmethod
    def coerce(cls, tool: "ToolSchema | Mapping[str, Any]") -> "ToolSchema":
        """Accept either a ``ToolSchema`` or a plain mapping."""
        return tool if isinstance(tool, ToolSchema) else cls.model_validate(dict(tool))

    def to_wire(self) -> Dict[str, Any]:
        """Return the vendor wire form ``{name, description, input_schema}``."""
        out: Dict[str, Any] = {"name": self.name, "input_schema": self.input_schema}
        if self.description:
            out["description"] = self.description
        return out


__all__ = ["ToolSchema"]
