"""Validated DTOs for the adapter boundary."""

from .adapter_params import AdapterParams, SystemPromptMode
from .sampling_params import SamplingParams
from .tool_schema import ToolSchema

__all__ = ["AdapterParams", "SystemPromptMode", "SamplingParams", "ToolSchema"]
