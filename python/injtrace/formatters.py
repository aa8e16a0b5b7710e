"""Output formatters for merged trees and path records."""

import json
import logging
from typing import Any, Dict, List

from .injector_tree import SplitPaths, generate_edge_ids, get_injector_ids_to_root
from .models import InjectorDescriptor, PathRecord, TreeNode

logger = logging.getLogger(__name__)


def _injector_to_dict(injector: InjectorDescriptor) -> Dict[str, str]:
    return {'id': injector.id, 'name': injector.name, 'type': injector.type.value}


def _path_to_dict(record: PathRecord) -> Dict[str, Any]:
    return {
        'node': record.node.name if record.node else None,
        'path': [_injector_to_dict(injector) for injector in record.path]
    }


class OutputFormatter:
    """Formatter for various output formats."""

    @staticmethod
    def _label(tree_node: TreeNode) -> str:
        injector = tree_node.injector
        label = f"{injector.name} ({injector.id}) [{injector.type.value}]"
        if tree_node.node is not None:
            label += f" <- {tree_node.node.name}"
        return label

    @staticmethod
    def _format_node(tree_node: TreeNode, prefix: str, is_last: bool, lines: List[str]) -> None:
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{OutputFormatter._label(tree_node)}")

        child_prefix = prefix + ("    " if is_last else "│   ")
        for i, child in enumerate(tree_node.children):
            OutputFormatter._format_node(child, child_prefix, i == len(tree_node.children) - 1, lines)

    @staticmethod
    def format_as_tree(root: TreeNode, title: str = "Injector Tree:") -> str:
        """Format a merged tree with unicode connectors, hiding the synthetic root."""
        lines = [title]
        top_level = root.children if root.is_hidden else [root]
        for i, child in enumerate(top_level):
            OutputFormatter._format_node(child, "", i == len(top_level) - 1, lines)
        if not top_level:
            lines.append("(empty)")
        return '\n'.join(lines) + '\n'

    @staticmethod
    def tree_to_dict(tree_node: TreeNode) -> Dict[str, Any]:
        """Convert a tree node and its descendants to plain dicts."""
        return {
            'injector': _injector_to_dict(tree_node.injector),
            'node': tree_node.node.name if tree_node.node else None,
            'children': [OutputFormatter.tree_to_dict(child) for child in tree_node.children]
        }

    @staticmethod
    def format_as_json(root: TreeNode) -> str:
        """Format a merged tree as nested JSON."""
        return json.dumps(OutputFormatter.tree_to_dict(root), indent=2) + '\n'

    @staticmethod
    def collect_edge_ids(root: TreeNode) -> List[str]:
        """
        Collect connector ids for every edge below the hidden root.

        Edges are read leaf to root, so each id is ``child-to-parent``.
        Ids are deduplicated keeping first-seen order.
        """
        seen = set()
        edges = []
        for tree_node in root.walk():
            if tree_node.children:
                continue
            ids = get_injector_ids_to_root(tree_node)
            if root.is_hidden:
                # Drop the synthetic root
                ids = ids[:-1]
            for edge_id in generate_edge_ids(ids):
                if edge_id not in seen:
                    seen.add(edge_id)
                    edges.append(edge_id)
        return edges

    @staticmethod
    def format_edges(root: TreeNode) -> str:
        """Format connector ids, one per line."""
        edges = OutputFormatter.collect_edge_ids(root)
        return ''.join(f"{edge}\n" for edge in edges)

    @staticmethod
    def format_as_paths(paths: List[PathRecord]) -> str:
        """Format path records as ``node: a -> b -> c`` lines."""
        lines = []
        for record in paths:
            node_name = record.node.name if record.node else '<none>'
            chain = ' -> '.join(str(injector) for injector in record.path)
            lines.append(f"{node_name}: {chain}")
        return '\n'.join(lines) + '\n'

    @staticmethod
    def format_split(split: SplitPaths) -> str:
        """Format a split result as JSON."""
        document = {
            'elementPaths': [_path_to_dict(record) for record in split.element_paths],
            'environmentPaths': [_path_to_dict(record) for record in split.environment_paths],
            'startingElementToEnvironmentPath': {
                element_id: [_injector_to_dict(injector) for injector in environment_path]
                for element_id, environment_path in split.starting_element_to_environment_path.items()
            }
        }
        return json.dumps(document, indent=2) + '\n'
