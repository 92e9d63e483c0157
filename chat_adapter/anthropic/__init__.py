"""Anthropic Messages API adapter."""

from .accumulator import BlockKind, BlockUnderConstruction, StreamAccumulator
from .assembler import accumulate_message, assemble, assemble_message
from .client import PROVIDER_NAME, AnthropicProvider
from .error_mapping import classify_http_error, classify_vendor_error
from .normalizer import NormalizedConversation, normalize
from .request_builder import build_request
from .stream_decoder import DecoderState, StreamDecoder
from .wire import VendorMessage, VendorRequest

__all__ = [
    "AnthropicProvider",
    "PROVIDER_NAME",
    "BlockKind",
    "BlockUnderConstruction",
    "StreamAccumulator",
    "accumulate_message",
    "assemble",
    "assemble_message",
    "classify_http_error",
    "classify_vendor_error",
    "NormalizedConversation",
    "normalize",
    "build_request",
    "DecoderState",
    "StreamDecoder",
    "VendorMessage",
    "VendorRequest",
]
