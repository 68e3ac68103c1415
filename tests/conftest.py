# pylint: disable=unused-argument
# pylint: disable=unused-import
# pylint: disable=bare-except
# pylint: disable=redefined-outer-name

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Any

import pytest
import yaml
from pytest import MonkeyPatch

import docker_compose_agent

## HELPERS
current_dir = Path(sys.argv[0] if __name__ == "__main__" else __file__).resolve().parent


## DIRs


@pytest.fixture(scope="session")
def root_dir() -> Path:
    pdir = current_dir.parent
    assert pdir.exists()
    return pdir


@pytest.fixture(scope="session")
def package_dir() -> Path:
    pdir = Path(docker_compose_agent.__file__).resolve().parent
    assert pdir.exists()
    return pdir


@pytest.fixture(scope="session")
def mocks_dir() -> Path:
    mocks_dir = current_dir / "mocks"
    assert mocks_dir.exists()
    return mocks_dir


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    pdir = tmp_path / "project"
    pdir.mkdir()
    return pdir


@pytest.fixture
def temp_dir(tmp_path: Path, monkeypatch: MonkeyPatch) -> Path:
    """isolated system temp dir, to check that nothing is left behind"""
    tdir = tmp_path / "tmp"
    tdir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", f"{tdir}")
    return tdir


## FILEs


@pytest.fixture(scope="session")
def valid_config_file(mocks_dir: Path) -> Path:
    path = mocks_dir / "valid_config.yaml"
    assert path.exists()
    return path


@pytest.fixture(scope="session")
def valid_docker_compose_file(mocks_dir: Path) -> Path:
    path = mocks_dir / "docker-compose.yml"
    assert path.exists()
    return path


@pytest.fixture
def docker_compose_file(project_dir: Path, valid_docker_compose_file: Path) -> Path:
    path = project_dir / "docker-compose.yml"
    shutil.copyfile(valid_docker_compose_file, path)
    return path


## CONFIGs


@pytest.fixture(scope="session")
def valid_docker_compose(valid_docker_compose_file: Path) -> dict[str, Any]:
    with valid_docker_compose_file.open() as fp:
        return yaml.safe_load(fp)
