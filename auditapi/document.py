"""
Document loading

Parses an OpenAPI document (YAML or JSON) and indexes where every node
starts in the source, so violations can carry line/column positions.
Also provides the pre-resolution step: validating the document and its
$ref targets with openapi-spec-validator.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from jsonschema_path import SchemaPath
from jsonschema_path.handlers.file import FilePathHandler
from openapi_spec_validator.shortcuts import get_validator_cls

from auditapi.functions.base import stringify_keys

logger = logging.getLogger(__name__)

# path tuple -> (line, column), both 0-based
Locations = Dict[Tuple[Any, ...], Tuple[int, int]]


def _refuse_remote(uri: str) -> Any:
    raise ValueError(f"Remote reference not fetched: {uri}")


# Schemes without a handler fall through to urlopen, so remote ones refuse
REF_HANDLERS = {
    "file": FilePathHandler("file"),
    "http": _refuse_remote,
    "https": _refuse_remote,
    "ftp": _refuse_remote,
}


@dataclass
class LoadedDocument:
    """Parsed document plus its source positions."""
    path: Path
    data: Any
    locations: Locations = field(default_factory=dict)


def _index_locations(loader: yaml.SafeLoader, node: yaml.Node, path: Tuple[Any, ...],
                     locations: Locations, active: set) -> None:
    # Recursive aliases would otherwise loop forever
    if id(node) in active:
        return
    active.add(id(node))

    if isinstance(node, yaml.MappingNode):
        for key_node, value_node in node.value:
            key = loader.construct_object(key_node, deep=True)
            child = path + (key,)
            locations[child] = (key_node.start_mark.line, key_node.start_mark.column)
            _index_locations(loader, value_node, child, locations, active)
    elif isinstance(node, yaml.SequenceNode):
        for index, item in enumerate(node.value):
            child = path + (index,)
            locations[child] = (item.start_mark.line, item.start_mark.column)
            _index_locations(loader, item, child, locations, active)

    active.discard(id(node))


def parse_document(content: str) -> Tuple[Any, Locations]:
    """Parse YAML/JSON text into data and a location index"""
    loader = yaml.SafeLoader(content)
    try:
        node = loader.get_single_node()
        if node is None:
            return None, {}
        data = loader.construct_document(node)
        locations: Locations = {}
        _index_locations(loader, node, (), locations, set())
        return data, locations
    finally:
        loader.dispose()


def load_document(file_path: Union[str, Path]) -> LoadedDocument:
    """
    Load an OpenAPI document from disk.

    Raises:
        FileNotFoundError: if the file does not exist
        yaml.YAMLError / json.JSONDecodeError: if the content cannot be parsed
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    content = path.read_text(encoding="utf-8")
    try:
        data, locations = parse_document(content)
    except yaml.YAMLError:
        if path.suffix.lower() != ".json":
            raise
        # JSON that YAML rejects (e.g. tab indentation); positions are lost
        logger.debug(f"YAML parser rejected {path}, falling back to JSON without positions")
        data, locations = json.loads(content), {}

    return LoadedDocument(path=path, data=data, locations=locations)


def resolve_document(file_path: Union[str, Path]) -> Optional[Any]:
    """
    Validate the document and the local $ref targets it points to.

    Only file references are followed; http(s) references fail resolution
    instead of being fetched.

    Returns the parsed document, or None if it could not be loaded or is not
    a valid OpenAPI document. Failure is not fatal: the audit goes on with
    the unresolved document and records a note.
    """
    path = Path(file_path).resolve()
    try:
        document = load_document(path)
        if not isinstance(document.data, dict):
            raise ValueError("OpenAPI document must be an object")
        data = stringify_keys(document.data)
        schema_path = SchemaPath.from_dict(data, base_uri=path.as_uri(), handlers=REF_HANDLERS)
        get_validator_cls(data)(schema_path).validate()
        return document.data
    except Exception as e:
        logger.warning(f"Could not resolve {path}: {e}")
        return None
