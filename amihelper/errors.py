"""
Error types raised by ami-helper.

Everything derives from AmiHelperError so the command line can report any
failure the same way. None of these are retried inside the selection engine.
"""

from typing import Optional


class AmiHelperError(Exception):
    """Base class for ami-helper failures."""
    pass


class ConfigurationExhausted(AmiHelperError):
    """Raised when more distinct segments are seen than the bitmask can hold."""

    def __init__(self, width: int, segment: str):
        self.width = width
        self.segment = segment
        super().__init__(
            f"All {width} segment bits are in use; cannot register {segment!r}"
        )


class PrefixMismatch(AmiHelperError):
    """Raised when a computed common prefix does not start every name."""

    def __init__(self, prefix: str, name: str):
        self.prefix = prefix
        self.name = name
        super().__init__(f"Common prefix {prefix!r} is not a prefix of {name!r}")


class VersionParseAmbiguous(AmiHelperError):
    """Raised when a version pattern matched but its numbers did not parse."""

    def __init__(self, rule: str, name: str, detail: Optional[str] = None):
        self.rule = rule
        self.name = name
        message = f"{rule} version pattern matched {name!r} but could not be parsed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SelectionCardinality(AmiHelperError):
    """Raised when exactly one AMI was required but a different number survived."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"singleton or smoke-test was specified but {count} AMIs were selected"
        )


class LookupFailed(AmiHelperError):
    """Raised when a parameter source cannot produce name/value pairs."""
    pass


class CredentialsMissing(AmiHelperError):
    """Raised when the AWS credentials needed for a live lookup are not set."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("  ".join(self.problems))


class InvalidSetting(AmiHelperError):
    """Raised when an AMI_HELPER_* environment setting has an unusable value."""

    def __init__(self, name: str, value: str, allowed):
        self.name = name
        self.value = value
        super().__init__(f"{name}={value!r} is not valid; use one of {', '.join(allowed)}")
