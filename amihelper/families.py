"""Per-family lookup and tagging profiles."""

from dataclasses import dataclass
from typing import Dict, FrozenSet

from .candidates import Family
from .preferred import AMAZON_RULE, DEBIAN_RULE, UBUNTU_RULE, VersionRule
from .segments import NEVER_IGNORE, IgnoreRule


@dataclass(frozen=True)
class FamilyProfile:
    family: Family
    path: str
    separator: str
    rule: VersionRule
    combining: FrozenSet[str] = frozenset()
    ignore: IgnoreRule = NEVER_IGNORE


AMAZON = FamilyProfile(
    family=Family.AMAZON,
    path="/aws/service/ami-amazon-linux-latest",
    separator="-",
    rule=AMAZON_RULE,
    combining=frozenset({"kernel"}),
)

# Build dates ("20231013-1532") would otherwise take a bit per release.
DEBIAN = FamilyProfile(
    family=Family.DEBIAN,
    path="/aws/service/debian/release",
    separator="/",
    rule=DEBIAN_RULE,
    ignore=IgnoreRule.matching(r"\d{8}-\d+"),
)

UBUNTU = FamilyProfile(
    family=Family.UBUNTU,
    path="/aws/service/canonical/ubuntu/server",
    separator="/",
    rule=UBUNTU_RULE,
    ignore=IgnoreRule.matching(r"\d{8}(?:[.]\d+)?"),
)

PROFILES: Dict[Family, FamilyProfile] = {
    profile.family: profile for profile in (AMAZON, DEBIAN, UBUNTU)
}
