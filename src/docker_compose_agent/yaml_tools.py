""" YAML helpers for docker-compose documents

- dump with support of commented scalars (see CommentedItem)
- load with errors mapped to this package's exceptions
- normalization into a canonical shape
- structural merge of two documents
"""

import copy
import logging
import re
from pathlib import Path
from typing import Any, Union

import yaml

from .exceptions import FilesystemError, MergeError

log = logging.getLogger(__name__)

# known top-level keys first, the rest alphabetically
TOP_LEVEL_KEYS_ORDER = ("version", "services", "networks", "volumes", "configs", "secrets")

# per-service keys that docker-compose accepts either as list of KEY=value or as mapping
_KEY_VALUE_KEYS = ("environment", "labels")
# per-service keys that docker-compose accepts either as a string or as a list
_LIST_KEYS = ("depends_on", "env_file")


class CommentedItem:
    """A scalar value dumped with an inline comment

    e.g. CommentedItem("5432", "default port") dumps as ``'5432' # default port``
    """

    def __init__(self, value: Any, comment: str):
        self.value = value
        self.comment = comment

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, CommentedItem)
            and self.value == other.value
            and self.comment == other.comment
        )

    def __repr__(self) -> str:
        return f"CommentedItem({self.value!r}, {self.comment!r})"


#
# dump
#


class _CommentedScalarNode(yaml.ScalarNode):
    def __init__(self, tag, value, comment: str, style=None):
        super().__init__(tag, value, style=style)
        self.comment = comment


class _CommentedScalarEvent(yaml.ScalarEvent):
    def __init__(self, anchor, tag, implicit, value, comment: str, style=None):
        super().__init__(anchor, tag, implicit, value, style=style)
        self.comment = comment


class ComposeDumper(yaml.SafeDumper):
    """SafeDumper for compose files

    - never emits anchors/aliases
    - None is written as an empty value (``webdata:``)
    - CommentedItem is written as its value followed by `` # comment``
    """

    def ignore_aliases(self, data) -> bool:
        return True

    def serialize_node(self, node, parent, index):
        if not isinstance(node, _CommentedScalarNode):
            super().serialize_node(node, parent, index)
            return
        self.serialized_nodes[node] = True
        self.descend_resolver(parent, index)
        detected_tag = self.resolve(yaml.ScalarNode, node.value, (True, False))
        default_tag = self.resolve(yaml.ScalarNode, node.value, (False, True))
        implicit = (node.tag == detected_tag), (node.tag == default_tag)
        self.emit(
            _CommentedScalarEvent(
                None, node.tag, implicit, node.value, node.comment, style=node.style
            )
        )
        self.ascend_resolver()

    def process_scalar(self):
        super().process_scalar()
        if isinstance(self.event, _CommentedScalarEvent) and self.event.comment:
            self.write_indicator(f"# {self.event.comment}", True)


def _represent_none(dumper: ComposeDumper, _data) -> yaml.Node:
    return dumper.represent_scalar("tag:yaml.org,2002:null", "")


def _represent_commented_item(dumper: ComposeDumper, item: CommentedItem) -> yaml.Node:
    node = dumper.represent_data(item.value)
    if not isinstance(node, yaml.ScalarNode) or not item.comment:
        return node
    # comments cannot span lines
    comment = " ".join(f"{item.comment}".split())
    return _CommentedScalarNode(node.tag, node.value, comment, style=node.style)


ComposeDumper.add_representer(type(None), _represent_none)
ComposeDumper.add_representer(CommentedItem, _represent_commented_item)


def dump_yaml(data: Any) -> str:
    return yaml.dump(
        data,
        Dumper=ComposeDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
        width=256,
    )


def write_yaml_file(path: Union[str, Path], data: Any) -> None:
    try:
        Path(path).write_text(dump_yaml(data), encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Could not write {path}: {e}") from e


#
# load
#

_BOOL_TAG = "tag:yaml.org,2002:bool"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"


class ComposeLoader(yaml.SafeLoader):
    """SafeLoader reading scalars as docker-compose does (YAML 1.2 core schema)

    - no base 60 numbers: ``22:22`` stays a string
    - only true/false are booleans: ``yes``, ``no``, ``on``, ``off`` stay strings
    """


ComposeLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag not in (_BOOL_TAG, _INT_TAG, _FLOAT_TAG)
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ComposeLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
ComposeLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(
        r"""^(?:[-+]?0b[0-1_]+
        |[-+]?0[0-7_]+
        |[-+]?(?:0|[1-9][0-9_]*)
        |[-+]?0x[0-9a-fA-F_]+)$""",
        re.X,
    ),
    list("-+0123456789"),
)
ComposeLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"""^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+][0-9]+)?
        |\.[0-9][0-9_]*(?:[eE][-+][0-9]+)?
        |[-+]?\.(?:inf|Inf|INF)
        |\.(?:nan|NaN|NAN))$""",
        re.X,
    ),
    list("-+0123456789."),
)


def load_yaml(text: str, *, origin: str = "<content>") -> dict[str, Any]:
    """Parses a YAML document that must be a mapping (an empty document is {})

    raises MergeError
    """
    try:
        data = yaml.load(text, Loader=ComposeLoader)  # nosec
    except yaml.YAMLError as e:
        raise MergeError(f"Invalid YAML in {origin}:\n{e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MergeError(
            f"Expected a mapping at the root of {origin}, got {type(data).__name__}"
        )
    return data


def load_yaml_file(path: Union[str, Path]) -> dict[str, Any]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Could not read {path}: {e}") from e
    return load_yaml(text, origin=f"{path}")


#
# normalization
#


def _key_value_list_to_mapping(entries: list) -> dict[str, Any]:
    mapping = {}
    for entry in entries:
        key, sep, value = f"{entry}".partition("=")
        mapping[key] = value if sep else None
    return mapping


def _normalize_service(service: Any) -> dict[str, Any]:
    if service is None:
        return {}
    if not isinstance(service, dict):
        return service
    for key in _KEY_VALUE_KEYS:
        if isinstance(service.get(key), list):
            service[key] = _key_value_list_to_mapping(service[key])
    for key in _LIST_KEYS:
        if isinstance(service.get(key), str):
            service[key] = [service[key]]
    return service


def normalize_compose(document: dict[str, Any]) -> dict[str, Any]:
    """Returns a copy of the compose document in a canonical shape

    - top-level keys ordered as TOP_LEVEL_KEYS_ORDER, then alphabetically
    - version as a string
    - services ordered by name
    - environment/labels as mappings, depends_on/env_file as lists
    """
    document = copy.deepcopy(document) if document else {}

    if document.get("version") is not None:
        document["version"] = f"{document['version']}"

    services = document.get("services")
    if isinstance(services, dict):
        document["services"] = {
            name: _normalize_service(services[name])
            for name in sorted(services, key=str)
        }

    normalized = {key: document[key] for key in TOP_LEVEL_KEYS_ORDER if key in document}
    for key in sorted(document, key=str):
        if key not in normalized:
            normalized[key] = document[key]
    return normalized


def normalize_file(source: Union[str, Path], destination: Union[str, Path]) -> None:
    log.debug("normalizing %s into %s", source, destination)
    write_yaml_file(destination, normalize_compose(load_yaml_file(source)))


#
# merge
#


def merge_documents(base: Any, new: Any) -> Any:
    """Merges new into base and returns the result (inputs are left untouched)

    - mappings are merged key by key, recursively
    - lists are concatenated (items of base first)
    - any other value in new overrides the one in base, except None which
      never replaces an existing value
    """
    if isinstance(base, dict) and isinstance(new, dict):
        merged = copy.deepcopy(base)
        for key, value in new.items():
            if key in merged:
                merged[key] = merge_documents(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    if isinstance(base, list) and isinstance(new, list):
        return copy.deepcopy(base) + copy.deepcopy(new)

    if new is None:
        return copy.deepcopy(base)

    return copy.deepcopy(new)


def merge_content_into_file(content: dict[str, Any], path: Union[str, Path]) -> None:
    """Merges content into the compose file at path and rewrites it normalized"""
    log.debug("merging content into %s", path)
    existing = normalize_compose(load_yaml_file(path))
    merged = merge_documents(existing, normalize_compose(content))
    write_yaml_file(path, normalize_compose(merged))
