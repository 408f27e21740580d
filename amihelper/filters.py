"""
Boolean predicates over candidate bitmasks.

The variant set is closed: AlwaysTrue, MaskEqualsValue and Or. Conjunction
needs no variant of its own since a mask over several bits already requires
all of them to hold their expected values.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from .candidates import ARCHITECTURE_TOKENS, Architecture, Candidate
from .segments import SegmentRegistry


@dataclass(frozen=True)
class AlwaysTrue:
    def matches(self, bitmask: int) -> bool:
        return True


@dataclass(frozen=True)
class MaskEqualsValue:
    mask: int
    value: int

    def matches(self, bitmask: int) -> bool:
        return (bitmask & self.mask) == self.value


@dataclass(frozen=True)
class Or:
    """Matches when any member matches. An empty Or matches everything."""

    filters: Tuple["Filter", ...] = ()

    def matches(self, bitmask: int) -> bool:
        if not self.filters:
            return True
        return any(f.matches(bitmask) for f in self.filters)


Filter = Union[AlwaysTrue, MaskEqualsValue, Or]


def apply_filter(bitmask_filter: Filter, candidates: Iterable[Candidate]) -> List[Candidate]:
    """Keep the candidates whose bitmask matches, preserving order."""
    return [c for c in candidates if bitmask_filter.matches(c.bitmask)]


def architecture_filter(registry: SegmentRegistry, architecture: Architecture) -> Filter:
    """Filter selecting one architecture, or everything for Architecture.ALL."""
    if architecture is Architecture.ALL:
        return AlwaysTrue()
    mask = registry.encode_sequence(ARCHITECTURE_TOKENS)
    value = registry.encode_sequence([architecture.token])
    return MaskEqualsValue(mask, value)
