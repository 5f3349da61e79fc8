"""
Pytest configuration and fixtures for archlink tests.
"""

import io
import tarfile

import pytest

from tests.fixtures.sample_data import SAMPLE_DESC_FILES, aur, official


@pytest.fixture
def python_candidates():
    """Official candidates returned for a 'python' search."""
    return [
        official("python", "Next generation of the python high-level scripting language", "3.12.7-1"),
        official("python-pip", "The PyPA recommended tool for installing Python packages", "24.2-1"),
    ]


@pytest.fixture
def mixed_candidates():
    """Candidates from both catalogs, including a cross-catalog duplicate."""
    return {
        "official": [
            official("python", "Next generation of the python high-level scripting language"),
            official("pypy", "A Python implementation written in Python, JIT enabled"),
            official("ruby", "An object-oriented language for quick and easy programming"),
            official("nmap", "Utility for network discovery and security auditing"),
        ],
        "aur": [
            aur("python", "Python built from git"),
            aur("python-foo", "Foo bindings for python"),
            aur("yay", "Yet another yogurt. Pacman wrapper and AUR helper written in go."),
        ],
    }


@pytest.fixture
def sync_db_dir(tmp_path):
    """Create a pacman sync directory holding a small core.db archive."""
    sync_dir = tmp_path / "sync"
    sync_dir.mkdir()

    with tarfile.open(sync_dir / "core.db", "w:gz") as tar:
        for pkg_dir, content in SAMPLE_DESC_FILES.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name=f"{pkg_dir}/desc")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))

    return sync_dir
