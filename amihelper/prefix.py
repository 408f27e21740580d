"""Common path prefix handling for raw parameter names."""

from typing import List, Sequence, Tuple

from .errors import PrefixMismatch

PATH_SEPARATOR = "/"


def common_prefix(names: Sequence[str], separator: str = PATH_SEPARATOR) -> str:
    """
    Return the prefix shared by every name, cut back to a separator boundary.

    The first divergence between the first name and any other (running off the
    end of a shorter name counts) is rounded down to just after the closest
    preceding separator. A single name is its own prefix.

    Args:
        names: Raw names, e.g. "/aws/service/debian/release/12/latest/amd64"
        separator: Character that delimits path components

    Returns:
        The shared prefix ("" for no names)
    """
    if not names:
        return ""
    first = names[0]
    if len(names) == 1:
        return first

    limit = len(first)
    diverged = False
    for name in names[1:]:
        bound = min(limit, len(name))
        index = 0
        while index < bound and first[index] == name[index]:
            index += 1
        if index < limit or index < len(name):
            diverged = True
        if index < limit:
            limit = index

    if not diverged:
        return first
    return first[:first.rfind(separator, 0, limit) + 1]


def strip_common_prefix(
    names: Sequence[str],
    separator: str = PATH_SEPARATOR,
) -> Tuple[str, List[str]]:
    """Remove the common prefix from each name.

    Raises PrefixMismatch if the computed prefix does not literally start a name.
    common_prefix never produces such a prefix, so this is a guard against a
    broken prefix computation rather than a path real input takes.
    """
    prefix = common_prefix(names, separator)
    stripped = []
    for name in names:
        if not name.startswith(prefix):
            raise PrefixMismatch(prefix, name)
        stripped.append(name[len(prefix):])
    return prefix, stripped
