# pylint: disable=redefined-outer-name
# pylint: disable=unused-argument
# pylint: disable=unused-variable

from pathlib import Path
from typing import Any

import pytest
import yaml

from docker_compose_agent.exceptions import FilesystemError, MergeError
from docker_compose_agent.yaml_tools import (
    CommentedItem,
    dump_yaml,
    load_yaml,
    load_yaml_file,
    merge_content_into_file,
    merge_documents,
    normalize_compose,
    normalize_file,
)


def test_dump_commented_items():
    text = dump_yaml(
        {
            "environment": {
                "PORT": CommentedItem(5432, "default port"),
                "HOST": CommentedItem("db", "multi\nline  comment"),
                "USER": "admin",
            },
            "command": ["run", CommentedItem("--fast", "skips checks")],
        }
    )

    assert text.splitlines() == [
        "environment:",
        "  PORT: 5432 # default port",
        "  HOST: db # multi line comment",
        "  USER: admin",
        "command:",
        "- run",
        "- --fast # skips checks",
    ]
    assert yaml.safe_load(text) == {
        "environment": {"PORT": 5432, "HOST": "db", "USER": "admin"},
        "command": ["run", "--fast"],
    }


def test_dump_compose_conventions():
    shared = {"type": "volume", "source": "data"}
    text = dump_yaml(
        {
            "version": "3.7",
            "services": {"a": {"volumes": [shared]}, "b": {"volumes": [shared]}},
            "volumes": {"data": None},
        }
    )

    assert text.startswith("version: '3.7'\n")
    assert "data:\n" in text
    assert "null" not in text
    # no anchors/aliases for shared objects
    assert "&" not in text
    assert "*" not in text


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", {}),
        ("# only a comment", {}),
        ("version: '3'", {"version": "3"}),
    ],
)
def test_load_yaml(text: str, expected: dict[str, Any]):
    assert load_yaml(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "services: [unclosed",
        "- a list\n- at the root",
        "just a scalar",
    ],
)
def test_load_invalid_yaml(text: str):
    with pytest.raises(MergeError):
        load_yaml(text)


def test_load_missing_file(tmp_path: Path):
    with pytest.raises(FilesystemError):
        load_yaml_file(tmp_path / "missing.yml")


def test_normalize_compose(valid_docker_compose: dict[str, Any]):
    document = {
        "x-common": {"restart": "always"},
        "volumes": valid_docker_compose["volumes"],
        "networks": {"default": None},
        "services": valid_docker_compose["services"],
        "version": 3.7,
    }

    normalized = normalize_compose(document)

    assert list(normalized) == ["version", "services", "networks", "volumes", "x-common"]
    assert normalized["version"] == "3.7"
    assert list(normalized["services"]) == ["db", "web"]
    web = normalized["services"]["web"]
    assert web["environment"] == {"NGINX_HOST": "example.com", "NGINX_PORT": "80"}
    assert web["depends_on"] == ["db"]
    assert normalized["services"]["db"]["env_file"] == [".env"]
    # input left untouched
    assert document["version"] == 3.7
    assert isinstance(document["services"]["web"]["environment"], list)


def test_normalize_key_value_lists():
    normalized = normalize_compose(
        {"services": {"app": {"labels": ["a=1", "b=x=y"], "environment": ["FLAG"]}}}
    )

    assert normalized["services"]["app"] == {
        "labels": {"a": "1", "b": "x=y"},
        "environment": {"FLAG": None},
    }


def test_normalize_is_stable(valid_docker_compose: dict[str, Any]):
    normalized = normalize_compose(valid_docker_compose)
    assert dump_yaml(normalize_compose(normalized)) == dump_yaml(normalized)


def test_normalize_file(valid_docker_compose_file: Path, tmp_path: Path):
    destination = tmp_path / "normalized.yml"

    normalize_file(valid_docker_compose_file, destination)

    assert yaml.safe_load(destination.read_text()) == normalize_compose(
        yaml.safe_load(valid_docker_compose_file.read_text())
    )


def test_merge_documents():
    base = {
        "version": "3.3",
        "services": {
            "web": {
                "image": "nginx:latest",
                "ports": ["80:80"],
                "environment": {"A": "1"},
            },
            "db": {"image": "postgres"},
        },
        "volumes": {"data": {"driver": "local"}},
    }
    new = {
        "version": "3.7",
        "services": {
            "web": {
                "image": "nginx:1.19",
                "ports": ["443:443"],
                "environment": {"B": "2"},
            },
            "cache": {"image": "redis"},
        },
        "volumes": {"data": None, "logs": None},
    }

    merged = merge_documents(base, new)

    assert merged == {
        "version": "3.7",
        "services": {
            "web": {
                "image": "nginx:1.19",
                "ports": ["80:80", "443:443"],
                "environment": {"A": "1", "B": "2"},
            },
            "db": {"image": "postgres"},
            "cache": {"image": "redis"},
        },
        "volumes": {"data": {"driver": "local"}, "logs": None},
    }
    # inputs left untouched
    assert base["services"]["web"]["ports"] == ["80:80"]
    assert "cache" not in base["services"]


def test_merge_documents_mismatching_kinds():
    assert merge_documents({"command": ["a", "b"]}, {"command": "c"}) == {"command": "c"}
    assert merge_documents({"x": "scalar"}, {"x": {"k": "v"}}) == {"x": {"k": "v"}}


def test_merge_keeps_commented_items():
    merged = merge_documents(
        {"environment": {"A": "1"}}, {"environment": {"A": CommentedItem("2", "new")}}
    )
    assert merged == {"environment": {"A": CommentedItem("2", "new")}}


def test_merge_content_into_file(docker_compose_file: Path):
    merge_content_into_file(
        {"services": {"web": {"environment": {"EXTRA": "yes"}}}}, docker_compose_file
    )

    data = yaml.safe_load(docker_compose_file.read_text())
    assert data["services"]["web"]["environment"] == {
        "NGINX_HOST": "example.com",
        "NGINX_PORT": "80",
        "EXTRA": "yes",
    }
    assert list(data) == ["version", "services", "volumes"]


def test_load_yaml_scalars_as_docker_compose():
    data = load_yaml(
        "ports:\n"
        "  - 22:22\n"
        "  - 8080:80\n"
        "environment:\n"
        "  FLAG: yes\n"
        "  LEGACY: off\n"
        "  ENABLED: true\n"
        "  DISABLED: False\n"
        "  WORKERS: 4\n"
        "  RATIO: 1.5\n"
        "  DURATION: 1:30.5\n"
    )

    assert data == {
        "ports": ["22:22", "8080:80"],
        "environment": {
            "FLAG": "yes",
            "LEGACY": "off",
            "ENABLED": True,
            "DISABLED": False,
            "WORKERS": 4,
            "RATIO": 1.5,
            "DURATION": "1:30.5",
        },
    }
