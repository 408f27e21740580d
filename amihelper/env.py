import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from .errors import InvalidSetting

DEFAULT_REGION = "us-east-2"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

REQUIRED_AWS_VARIABLES = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY")


def load_env() -> None:
    """Load .env from the working directory if present.
    Variables already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


@dataclass(frozen=True)
class Settings:
    region: str = DEFAULT_REGION
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Raises:
            InvalidSetting: AMI_HELPER_LOG_LEVEL names no logging level
        """
        environ = os.environ if environ is None else environ
        log_dir = environ.get("AMI_HELPER_LOG_DIR")
        log_level = (environ.get("AMI_HELPER_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
        if log_level not in LOG_LEVELS:
            raise InvalidSetting("AMI_HELPER_LOG_LEVEL", environ["AMI_HELPER_LOG_LEVEL"], LOG_LEVELS)
        return cls(
            region=environ.get("AMI_HELPER_REGION") or DEFAULT_REGION,
            log_level=log_level,
            log_dir=Path(log_dir) if log_dir else None,
        )


def check_aws_credentials(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Returns one message per missing AWS credential variable.
    Empty list means a live lookup can be attempted.
    """
    environ = os.environ if environ is None else environ
    problems: List[str] = []
    for name in REQUIRED_AWS_VARIABLES:
        if not environ.get(name):
            problems.append(f"{name} is not set.  It must be set to a valid AWS credential.")
    return problems
