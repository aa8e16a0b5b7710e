"""Input parsers for forest and path snapshots."""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from .fetch import fetch_snapshot
from .injector_tree import grab_injector_paths_from_forest
from .models import InjectorDescriptor, InjectorType, InspectedNode, PathRecord

logger = logging.getLogger(__name__)


def _is_url(path: str) -> bool:
    """Check if a path is a URL."""
    return urlparse(path).scheme in ('http', 'https')


def _read_content(path: str) -> str:
    """
    Read content from either a file path or URL.

    Raises:
        OSError: If the file can't be read
        requests.RequestException: If URL fetch fails
    """
    if _is_url(path):
        return fetch_snapshot(path)
    logger.info(f"Reading content from file: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _load_json(source: str) -> Any:
    content = _read_content(source)
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"{source} is not valid JSON: {e}") from e


class ForestParser:
    """Parser for directive forest and injector path snapshots."""

    @staticmethod
    def parse_injector(data: Dict[str, Any]) -> InjectorDescriptor:
        """Build an InjectorDescriptor from ``{"id", "name", "type"}``."""
        if not isinstance(data, dict) or 'id' not in data:
            raise ValueError(f"Injector entry must be an object with an 'id': {data!r}")

        raw_type = data.get('type')
        try:
            injector_type = InjectorType(raw_type)
        except ValueError:
            raise ValueError(f"Unknown injector type {raw_type!r} for injector {data['id']!r}") from None
        if injector_type == InjectorType.HIDDEN:
            raise ValueError(f"Injector {data['id']!r} uses the reserved 'hidden' type")

        injector_id = str(data['id'])
        return InjectorDescriptor(id=injector_id, name=data.get('name') or injector_id, type=injector_type)

    @staticmethod
    def _node_name(data: Dict[str, Any]) -> str:
        if data.get('name'):
            return data['name']
        component = data.get('component') or {}
        if component.get('name'):
            return component['name']
        for directive in data.get('directives') or []:
            if directive.get('name'):
                return directive['name']
        return '<unknown>'

    @staticmethod
    def parse_node(data: Dict[str, Any]) -> InspectedNode:
        """Recursively build an InspectedNode from its JSON form."""
        if not isinstance(data, dict):
            raise ValueError(f"Forest node must be an object: {data!r}")

        raw_path = data.get('resolutionPath', data.get('resolution_path')) or []
        return InspectedNode(
            name=ForestParser._node_name(data),
            component=data.get('component'),
            directives=list(data.get('directives') or []),
            children=[ForestParser.parse_node(child) for child in data.get('children') or []],
            resolution_path=[ForestParser.parse_injector(entry) for entry in raw_path],
        )

    @staticmethod
    def parse_forest_data(data: Any) -> List[InspectedNode]:
        """Parse an already-decoded forest document."""
        if isinstance(data, dict) and 'forest' in data:
            data = data['forest']
        if not isinstance(data, list):
            raise ValueError("Forest document must be a list of nodes or an object with a 'forest' key")
        return [ForestParser.parse_node(node) for node in data]

    @staticmethod
    def parse_forest(source: str) -> List[InspectedNode]:
        """
        Load a directive forest from a JSON file or URL.

        Args:
            source: File path or http(s) URL

        Returns:
            Root nodes of the forest
        """
        forest = ForestParser.parse_forest_data(_load_json(source))
        logger.info(f"Loaded forest with {len(forest)} root nodes from {source}")
        return forest

    @staticmethod
    def parse_paths_data(data: Any) -> List[PathRecord]:
        """Parse an already-decoded list of ``{"node", "path"}`` records."""
        if isinstance(data, dict) and 'paths' in data:
            data = data['paths']
        if not isinstance(data, list):
            raise ValueError("Paths document must be a list of records or an object with a 'paths' key")

        records = []
        for entry in data:
            if not isinstance(entry, dict) or 'path' not in entry:
                raise ValueError(f"Path record must be an object with a 'path': {entry!r}")
            node: Optional[InspectedNode] = None
            raw_node = entry.get('node')
            if isinstance(raw_node, str):
                node = InspectedNode(name=raw_node)
            elif isinstance(raw_node, dict):
                node = ForestParser.parse_node(raw_node)
            records.append(PathRecord(
                node=node,
                path=[ForestParser.parse_injector(injector) for injector in entry['path']]
            ))
        return records

    @staticmethod
    def parse_paths(source: str) -> List[PathRecord]:
        """Load root-first path records from a JSON file or URL."""
        records = ForestParser.parse_paths_data(_load_json(source))
        logger.info(f"Loaded {len(records)} path records from {source}")
        return records

    @staticmethod
    def detect_format_data(data: Any) -> str:
        """Tell a decoded forest document from a decoded paths document."""
        if isinstance(data, dict):
            if 'paths' in data:
                return 'paths'
            return 'forest'
        if isinstance(data, list) and data and isinstance(data[0], dict) and 'path' in data[0]:
            return 'paths'
        return 'forest'

    @staticmethod
    def detect_format(source: str) -> str:
        """Return 'forest' or 'paths' for a JSON file or URL."""
        return ForestParser.detect_format_data(_load_json(source))

    @staticmethod
    def load(source: str) -> Tuple[Optional[List[InspectedNode]], List[PathRecord]]:
        """
        Load either document kind and return root-first path records.

        Returns:
            Tuple of (forest, path records); forest is None for a paths document
        """
        data = _load_json(source)
        detected_format = ForestParser.detect_format_data(data)
        logger.info(f"Detected input format: {detected_format}")

        if detected_format == 'paths':
            return None, ForestParser.parse_paths_data(data)

        forest = ForestParser.parse_forest_data(data)
        return forest, grab_injector_paths_from_forest(forest)
