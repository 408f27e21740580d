"""
Segment registry and bitmask builder.

Every distinct segment (a tag-like token taken from an image name) owns one bit
of a fixed-width bitmask. Bits are handed out in first-seen order and never
reused, so a mask built while processing one family compares correctly against
candidates of every other family that shares the registry.
"""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Union

from .errors import ConfigurationExhausted

BITMASK_WIDTH = 128
JOINER = "-"


@dataclass(frozen=True)
class IgnoreRule:
    """Segments that fully match the pattern contribute nothing to a bitmask."""

    pattern: Optional[re.Pattern] = None

    @classmethod
    def matching(cls, regex: str) -> "IgnoreRule":
        return cls(re.compile(regex))

    def __call__(self, segment: str) -> bool:
        if self.pattern is None:
            return False
        return self.pattern.fullmatch(segment) is not None


NEVER_IGNORE = IgnoreRule()


# Combining automaton states
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Pending:
    left: str


IDLE = Idle()


def combine_tokens(
    tokens: Iterable[str],
    combining: FrozenSet[str],
    joiner: str = JOINER,
) -> Iterator[str]:
    """Yield segments, joining each combining token with the token after it.

    "kernel", "default" with "kernel" combining yields "kernel-default". A
    combining token at the very end is yielded alone.
    """
    state: Union[Idle, Pending] = IDLE
    for token in tokens:
        if isinstance(state, Pending):
            yield joiner.join((state.left, token))
            state = IDLE
        elif token in combining:
            state = Pending(token)
        else:
            yield token
    if isinstance(state, Pending):
        yield state.left


class SegmentRegistry:
    """
    Maps segments to bits and encodes token sequences as bitmasks.

    Holds per-family configuration (combining set and ignore rule) that is
    reset before each family pass. Not safe to share between concurrent passes.
    """

    def __init__(self, width: int = BITMASK_WIDTH):
        self.width = width
        self._bits: Dict[str, int] = {}
        self._segments: List[str] = []
        self._aliases: Dict[str, Set[str]] = {}
        self.combining: FrozenSet[str] = frozenset()
        self.ignore: IgnoreRule = NEVER_IGNORE

    def __len__(self) -> int:
        return len(self._segments)

    def __contains__(self, segment: str) -> bool:
        return segment in self._bits

    def register_or_lookup(self, segment: str) -> int:
        """Return the bit for a segment, assigning the next free one on first sight."""
        bit = self._bits.get(segment)
        if bit is not None:
            return bit
        bit = len(self._segments)
        if bit >= self.width:
            raise ConfigurationExhausted(self.width, segment)
        self._bits[segment] = bit
        self._segments.append(segment)
        assert self._segments[bit] == segment
        return bit

    def declare_alias(self, key: str, alias: str) -> None:
        """Make encoding ``key`` also set ``alias``'s bit (but not the reverse)."""
        self.register_or_lookup(key)
        self.register_or_lookup(alias)
        self._aliases.setdefault(key, set()).add(alias)

    def encode(self, segment: str) -> int:
        if self.ignore(segment):
            return 0
        word = 1 << self.register_or_lookup(segment)
        for alias in self._aliases.get(segment, ()):
            word |= 1 << self._bits[alias]
        return word

    def encode_sequence(self, tokens: Iterable[str]) -> int:
        bitmask = 0
        for segment in combine_tokens(tokens, self.combining):
            bitmask |= self.encode(segment)
        return bitmask

    def set_combining(self, segments: Iterable[str]) -> None:
        self.combining = frozenset(segments)

    def clear_combining(self) -> None:
        self.combining = frozenset()

    def set_ignore(self, rule: IgnoreRule) -> None:
        self.ignore = rule

    def clear_ignore(self) -> None:
        self.ignore = NEVER_IGNORE

    def configure(self, combining: Iterable[str] = (), ignore: IgnoreRule = NEVER_IGNORE) -> None:
        """Reset combining and ignore state for the next family pass."""
        self.set_combining(combining)
        self.set_ignore(ignore)

    def segments_of(self, bitmask: int) -> List[str]:
        """Names of the segments whose bits are set, in bit order."""
        return [segment for bit, segment in enumerate(self._segments) if bitmask >> bit & 1]
