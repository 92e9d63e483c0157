"""Model capability classification.

Capabilities are derived from data, not code branches: each capability owns an
ordered list of inclusion patterns and a list of exclusion patterns matched
against the model identifier. Adding a newly released model therefore means
editing the pattern table (built-in defaults or the external config file),
never this module.

Matching rules:
- Patterns are shell-style wildcards (``fnmatch``), compared case-insensitively.
- An exclusion match always wins over an inclusion match.
- An id matching no inclusion pattern gets the capability denied, so unknown
  identifiers degrade to "no images, no tools" instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ...config import get_capability_patterns

CAP_IMAGES = "images"
CAP_TOOLS = "tools"


@dataclass(frozen=True)
class ModelCapabilities:
    """What a model id is allowed to receive."""

    supports_images: bool = False
    supports_tools: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {"supports_images": self.supports_images, "supports_tools": self.supports_tools}


@dataclass(frozen=True)
class _PatternSet:
    include: Tuple[str, ...]
    exclude: Tuple[str, ...]

    def allows(self, model_id: str) -> bool:
        if any(fnmatchcase(model_id, p) for p in self.exclude):
            return False
        return any(fnmatchcase(model_id, p) for p in self.include)


def _lowered(patterns: Optional[Sequence[str]]) -> Tuple[str, ...]:
    return tuple(str(p).strip().lower() for p in (patterns or ()) if str(p).strip())


class CapabilityClassifier:
    """Pattern-table classifier. Immutable once built; safe to share across calls.

    Parameters:
        table: Mapping of capability name to ``{"include": [...], "exclude": [...]}``.
            When ``None``, the table is loaded via :func:`load_capability_table`.
    """

    def __init__(self, table: Optional[Mapping[str, Mapping[str, Sequence[str]]]] = None) -> None:
        source = load_capability_table() if table is None else table
        self._sets: Dict[str, _PatternSet] = {
            name: _PatternSet(_lowered(spec.get("include")), _lowered(spec.get("exclude")))
            for name, spec in source.items()
        }

    def supports(self, model_id: str, capability: str) -> bool:
        """Return whether ``model_id`` has ``capability``; unknown capabilities are denied."""
        pattern_set = self._sets.get(capability)
        if pattern_set is None or not model_id:
            return False
        return pattern_set.allows(model_id.strip().lower())

    def capabilities(self, model_id: str) -> ModelCapabilities:
        return ModelCapabilities(
            supports_images=self.supports(model_id, CAP_IMAGES),
            supports_tools=self.supports(model_id, CAP_TOOLS),
        )

    def patterns(self) -> Dict[str, Dict[str, List[str]]]:
        """Return a copy of the effective pattern table (diagnostics)."""
        return {
            name: {"include": list(s.include), "exclude": list(s.exclude)}
            for name, s in self._sets.items()
        }


def load_capability_table() -> Dict[str, Dict[str, List[str]]]:
    """Return the capability table: built-in defaults overlaid by the config file."""
    return get_capability_patterns()


_DEFAULT: Optional[CapabilityClassifier] = None


def default_classifier() -> CapabilityClassifier:
    """Return the process-wide classifier, building it on first use."""
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = CapabilityClassifier()
    return _DEFAULT


def reset_default_classifier() -> None:
    """Drop the cached classifier so the next call reloads the table."""
    global _DEFAULT
    _DEFAULT = None


def capabilities(model_id: str) -> ModelCapabilities:
    """Classify ``model_id`` with the default classifier."""
    return default_classifier().capabilities(model_id)


__all__ = [
    "CAP_IMAGES",
    "CAP_TOOLS",
    "ModelCapabilities",
    "CapabilityClassifier",
    "load_capability_table",
    "default_classifier",
    "reset_default_classifier",
    "capabilities",
]
