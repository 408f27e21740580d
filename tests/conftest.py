"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Dict, List, Tuple

from amihelper.selection import new_registry

AMAZON_PATH = "/aws/service/ami-amazon-linux-latest"
DEBIAN_PATH = "/aws/service/debian/release"
UBUNTU_PATH = "/aws/service/canonical/ubuntu/server"


class FakeSource:
    """Parameter source serving canned pairs per lookup path."""

    kind = "fake"

    def __init__(self, pairs_by_path: Dict[str, List[Tuple[str, str]]]):
        self.pairs_by_path = pairs_by_path
        self.requested: List[str] = []

    def get_pairs(self, path: str) -> List[Tuple[str, str]]:
        self.requested.append(path)
        return list(self.pairs_by_path.get(path, []))


@pytest.fixture
def registry():
    """Registry with the x86_64 -> amd64 alias declared."""
    return new_registry()


@pytest.fixture
def amazon_scenario_pairs() -> List[Tuple[str, str]]:
    """Two al2023 builds and one older al2022 build."""
    return [
        ("al2023-ami-minimal-kernel-default-x86_64", "ami-0a2023x86"),
        ("al2023-ami-minimal-kernel-default-arm64", "ami-0a2023arm"),
        ("al2022-ami-minimal-kernel-default-x86_64", "ami-0a2022x86"),
    ]


@pytest.fixture
def debian_scenario_pairs() -> List[Tuple[str, str]]:
    """Debian 12 has no arm64 image."""
    return [
        ("11/latest/amd64", "ami-0d11amd"),
        ("11/latest/arm64", "ami-0d11arm"),
        ("12/latest/amd64", "ami-0d12amd"),
    ]


@pytest.fixture
def snapshot_document() -> Dict:
    """A GetParametersByPath style document covering all three families."""
    names = {
        f"{AMAZON_PATH}/al2023-ami-kernel-default-x86_64": "ami-0a01",
        f"{AMAZON_PATH}/al2023-ami-kernel-default-arm64": "ami-0a02",
        f"{AMAZON_PATH}/al2023-ami-minimal-kernel-default-x86_64": "ami-0a03",
        f"{AMAZON_PATH}/al2023-ami-minimal-kernel-default-arm64": "ami-0a04",
        f"{AMAZON_PATH}/al2023-ami-kernel-6.1-x86_64": "ami-0a05",
        f"{AMAZON_PATH}/amzn2-ami-hvm-x86_64-gp2": "ami-0a06",
        f"{AMAZON_PATH}/amzn2-ami-kernel-5.10-hvm-x86_64-gp2": "ami-0a07",
        f"{DEBIAN_PATH}/11/latest/amd64": "ami-0d01",
        f"{DEBIAN_PATH}/11/latest/arm64": "ami-0d02",
        f"{DEBIAN_PATH}/12/latest/amd64": "ami-0d03",
        f"{DEBIAN_PATH}/12/latest/arm64": "ami-0d04",
        f"{DEBIAN_PATH}/12/20231013-1532/amd64": "ami-0d05",
        f"{UBUNTU_PATH}/20.04/stable/current/amd64/hvm/ebs-gp2/ami-id": "ami-0u01",
        f"{UBUNTU_PATH}/22.04/stable/current/amd64/hvm/ebs-gp2/ami-id": "ami-0u02",
        f"{UBUNTU_PATH}/22.04/stable/current/arm64/hvm/ebs-gp2/ami-id": "ami-0u03",
        f"{UBUNTU_PATH}/22.04/stable/20230919/amd64/hvm/ebs-gp2/ami-id": "ami-0u04",
        f"{UBUNTU_PATH}/jammy/stable/current/amd64/hvm/ebs-gp2/ami-id": "ami-0u05",
    }
    return {
        "Parameters": [
            {"Name": name, "Type": "String", "Value": value, "Version": 1}
            for name, value in names.items()
        ]
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_document) -> Path:
    """Write the snapshot document to a temporary file."""
    path = tmp_path / "parameters.json"
    path.write_text(json.dumps(snapshot_document, indent=2))
    return path


@pytest.fixture
def snapshot_pairs(snapshot_document) -> Dict[str, List[Tuple[str, str]]]:
    """Snapshot pairs grouped by family lookup path."""
    grouped: Dict[str, List[Tuple[str, str]]] = {}
    for record in snapshot_document["Parameters"]:
        for path in (AMAZON_PATH, DEBIAN_PATH, UBUNTU_PATH):
            if record["Name"].startswith(path + "/"):
                grouped.setdefault(path, []).append((record["Name"], record["Value"]))
    return grouped


@pytest.fixture
def fake_source(snapshot_pairs) -> FakeSource:
    return FakeSource(snapshot_pairs)


@pytest.fixture
def make_source():
    """Build a FakeSource from a {path: pairs} mapping."""
    return FakeSource
