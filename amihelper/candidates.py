"""Families, architectures and the candidate record they describe."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterable, List


class Family(IntEnum):
    """Image distributors, valued by their display rank."""

    ALL = 1
    AMAZON = 2
    DEBIAN = 3
    UBUNTU = 4

    @property
    def label(self) -> str:
        return _FAMILY_LABELS[self]

    @classmethod
    def from_option(cls, value: str) -> "Family":
        return cls[value.upper()]

    def __str__(self) -> str:
        return self.label


_FAMILY_LABELS = {
    Family.ALL: "All",
    Family.AMAZON: "Amazon Linux",
    Family.DEBIAN: "Debian",
    Family.UBUNTU: "Ubuntu",
}


class Architecture(Enum):
    ALL = "all"
    AMD64 = "amd64"
    ARM64 = "arm64"

    @property
    def token(self) -> str:
        if self is Architecture.ALL:
            raise ValueError("Architecture.ALL has no segment token")
        return self.value

    @property
    def instance_group(self) -> str:
        """EC2 instance family used when smoke testing this architecture."""
        if self is Architecture.ALL:
            raise ValueError("Architecture.ALL has no instance group")
        return _INSTANCE_GROUPS[self]


_INSTANCE_GROUPS = {
    Architecture.AMD64: "t3a",
    Architecture.ARM64: "t4g",
}

ARCHITECTURE_TOKENS = (Architecture.AMD64.value, Architecture.ARM64.value)


@dataclass(frozen=True, order=True)
class Candidate:
    """One selectable image.

    Ordered by family rank, then name, then payload. The bitmask is derived
    from the name so it takes no part in comparisons.
    """

    family: Family
    name: str
    payload: str
    bitmask: int = field(default=0, compare=False, repr=False)

    @property
    def ami(self) -> str:
        return self.payload


def sorted_unique(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Sort candidates and drop repeats of the same family/name/payload."""
    seen = set()
    result = []
    for candidate in sorted(candidates):
        if candidate not in seen:
            seen.add(candidate)
            result.append(candidate)
    return result
