"""
Preferred-version selection.

Each family publishes many images per release. A VersionRule describes how to
read a release out of a candidate name, how releases compare, and which
qualifier segments mark the canonical image. preferred_filter turns a rule and
a family's candidates into a filter that keeps, per architecture, only the
canonical images of the newest release.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, NamedTuple, Sequence, Tuple

from .candidates import ARCHITECTURE_TOKENS, Candidate
from .errors import VersionParseAmbiguous
from .filters import MaskEqualsValue, Or
from .logger import get_logger
from .segments import SegmentRegistry

logger = get_logger()


class PreferredVersion(NamedTuple):
    key: Any
    token: str


@dataclass(frozen=True)
class VersionRule:
    """How one family's releases are recognized and ranked.

    Attributes:
        name: Rule name used in log messages and errors
        pattern: Matched at the start of a candidate name
        extract: Turns a match into a PreferredVersion
        qualifiers: Segments that must accompany the version token
        architectures: Architecture segments, one filter branch per entry
    """

    name: str
    pattern: re.Pattern
    extract: Callable[[re.Match], PreferredVersion]
    qualifiers: Tuple[str, ...] = ()
    architectures: Tuple[str, ...] = ARCHITECTURE_TOKENS


def _parse_int(text: str) -> int:
    return int(text, 10)


def counted_version(match: re.Match) -> PreferredVersion:
    """A plain release number, e.g. "12"."""
    number = _parse_int(match.group(1))
    return PreferredVersion(number, str(number))


def dotted_version(match: re.Match) -> PreferredVersion:
    """A major.minor release with a two-digit minor, e.g. "22.04"."""
    major = _parse_int(match.group(1))
    minor = _parse_int(match.group(2))
    key = major * 100 + minor
    return PreferredVersion(key, f"{key // 100}.{key % 100:02}")


def labeled_version(match: re.Match) -> PreferredVersion:
    """A label with an optional count, e.g. "al2023" or "amzn" (count 1)."""
    label = match.group(1)
    count = match.group(3)
    number = _parse_int(count) if count else 1
    return PreferredVersion((number, label), label)


# Both qualifiers are in the value: the minimal default-kernel images are the ones selected.
AMAZON_RULE = VersionRule(
    name="amazon",
    pattern=re.compile(r"((al|amzn)([0-9]*))-"),
    extract=labeled_version,
    qualifiers=("kernel-default", "minimal"),
)

DEBIAN_RULE = VersionRule(
    name="debian",
    pattern=re.compile(r"([1-9][0-9]*)/"),
    extract=counted_version,
    qualifiers=("latest",),
)

UBUNTU_RULE = VersionRule(
    name="ubuntu",
    pattern=re.compile(r"([1-9][0-9]*)[.]([0-9][0-9])/"),
    extract=dotted_version,
    qualifiers=("stable", "current"),
)


def collect_versions(rule: VersionRule, candidates: Iterable[Candidate]) -> List[PreferredVersion]:
    """Versions found in candidate names, sorted ascending by key."""
    versions = []
    for candidate in candidates:
        match = rule.pattern.match(candidate.name)
        if match is None:
            continue
        try:
            versions.append(rule.extract(match))
        except ValueError as e:
            raise VersionParseAmbiguous(rule.name, candidate.name, str(e)) from e
    versions.sort(key=lambda v: v.key)
    return versions


def preferred_filter(
    rule: VersionRule,
    candidates: Sequence[Candidate],
    registry: SegmentRegistry,
) -> Or:
    """
    Build the filter keeping the newest canonical candidates of a family.

    Returns an empty (pass-everything) Or when no candidate name carries a
    version. Otherwise one MaskEqualsValue per architecture: the mask covers
    the version token, the qualifiers and every architecture; the value sets
    the version, the qualifiers and exactly one architecture.
    """
    versions = collect_versions(rule, candidates)
    if not versions:
        logger.debug("No versioned names found", rule=rule.name, candidates=len(candidates))
        return Or()

    preferred = versions[-1]
    logger.debug("Preferred version chosen", rule=rule.name, version=preferred.token)

    mask = registry.encode_sequence([preferred.token, *rule.qualifiers, *rule.architectures])
    branches = []
    for architecture in rule.architectures:
        value = registry.encode_sequence([preferred.token, *rule.qualifiers, architecture])
        branches.append(MaskEqualsValue(mask, value))
    return Or(tuple(branches))
