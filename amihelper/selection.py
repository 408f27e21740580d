"""
Selection pipeline.

For each requested family: fetch the published (name, AMI) pairs, strip the
shared path prefix, tag every name as a bitmask, and keep the candidates that
match the family's preferred filter. The survivors of all families are then
narrowed to the requested architecture.

Families are processed one after another against a single SegmentRegistry so
that architecture bits mean the same thing in every family.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .candidates import Architecture, Candidate, Family, sorted_unique
from .env import DEFAULT_REGION
from .errors import SelectionCardinality
from .families import PROFILES, FamilyProfile
from .filters import apply_filter, architecture_filter
from .logger import get_logger
from .preferred import preferred_filter
from .prefix import strip_common_prefix
from .segments import SegmentRegistry
from .sources import Pair, ParameterSource

logger = get_logger()


@dataclass(frozen=True)
class SelectOptions:
    family: Family = Family.ALL
    architecture: Architecture = Architecture.ALL
    singleton: bool = False
    just_ami: bool = False
    smoke_test: bool = False
    region: str = DEFAULT_REGION
    snapshot: Optional[str] = None

    def can_only_be_one(self) -> bool:
        return self.singleton or self.smoke_test

    def includes(self, family: Family) -> bool:
        return self.family in (Family.ALL, family)


def new_registry() -> SegmentRegistry:
    """A registry where "x86_64" also tags a name as "amd64"."""
    registry = SegmentRegistry()
    registry.declare_alias("x86_64", "amd64")
    return registry


def candidates_from_pairs(
    profile: FamilyProfile,
    pairs: Sequence[Pair],
    registry: SegmentRegistry,
) -> List[Candidate]:
    """Tag a family's (name, AMI) pairs, returning sorted, de-duplicated candidates.

    Leaves the registry configured for this family.
    """
    registry.configure(profile.combining, profile.ignore)
    prefix, names = strip_common_prefix([name for name, _ in pairs])
    logger.debug("Stripped common prefix", family=profile.family.label, prefix=prefix)

    family_bits = registry.encode_sequence([profile.family.label])
    candidates = []
    for name, (_, payload) in zip(names, pairs):
        bitmask = registry.encode_sequence(name.split(profile.separator)) | family_bits
        candidates.append(Candidate(profile.family, name, payload, bitmask))
    return sorted_unique(candidates)


def select_family(
    profile: FamilyProfile,
    pairs: Sequence[Pair],
    registry: SegmentRegistry,
) -> List[Candidate]:
    """Candidates of one family that match its preferred filter."""
    candidates = candidates_from_pairs(profile, pairs, registry)
    preferred = preferred_filter(profile.rule, candidates, registry)
    selected = apply_filter(preferred, candidates)

    logger.record_family(profile.family.label, len(candidates), len(selected))
    for candidate in selected:
        logger.debug(
            "Selected candidate",
            family=profile.family.label,
            name=candidate.name,
            ami=candidate.ami,
            segments=registry.segments_of(candidate.bitmask),
        )
    return selected


def select(
    options: SelectOptions,
    source: ParameterSource,
    registry: Optional[SegmentRegistry] = None,
) -> List[Candidate]:
    """
    Run every requested family pass and apply the architecture filter.

    Args:
        options: What to select
        source: Where the (name, AMI) pairs come from
        registry: Shared segment registry (default: new_registry())

    Returns:
        The selected candidates, ordered by family then name

    Raises:
        SelectionCardinality: exactly one result was required but not found
    """
    if registry is None:
        registry = new_registry()

    selected: List[Candidate] = []
    for family, profile in sorted(PROFILES.items()):
        if not options.includes(family):
            continue
        pairs = source.get_pairs(profile.path)
        selected.extend(select_family(profile, pairs, registry))

    registry.configure()
    details = apply_filter(architecture_filter(registry, options.architecture), selected)
    logger.info("Selection complete", architecture=options.architecture.value, selected=len(details))

    if options.can_only_be_one() and len(details) != 1:
        raise SelectionCardinality(len(details))
    return details
