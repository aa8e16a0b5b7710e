"""Reshapes injector resolution paths into chains, split chains and merged trees.

Every inspected node reports its own resolution path nearest-first. The
functions here turn those independent reports into:

- root-first chains, one per node (``grab_injector_paths_from_forest``)
- element-only and environment-only chains plus an index from a starting
  element to the environment injectors it resolves through
  (``split_injector_paths``)
- a single merged tree under a hidden root (``transform_paths_into_tree``)

None of them mutate their inputs or raise on degenerate data.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import (
    HIDDEN_ROOT_INJECTOR,
    InjectorDescriptor,
    InjectorType,
    InspectedNode,
    PathRecord,
    TreeNode,
)

logger = logging.getLogger(__name__)


@dataclass
class SplitPaths:
    """Result of splitting chains by injector kind.

    Attributes:
        element_paths: One record per input, element injectors only
        environment_paths: One record per input, environment injectors only
        starting_element_to_environment_path: Starting element id -> the
            environment injectors that element resolves through, nearest first
    """
    element_paths: List[PathRecord] = field(default_factory=list)
    environment_paths: List[PathRecord] = field(default_factory=list)
    starting_element_to_environment_path: Dict[str, List[InjectorDescriptor]] = field(default_factory=dict)


def equal_injector(a: InjectorDescriptor, b: InjectorDescriptor) -> bool:
    """Two injectors are the same iff their ids match."""
    return a.id == b.id


def get_injector_ids_to_root(tree_node) -> List[str]:
    """
    Collect injector ids from a rendered tree node up to its root.

    Works on anything exposing ``injector`` and an optional ``parent``.
    The input must not contain a parent cycle.

    Args:
        tree_node: Node to start from (included in the result)

    Returns:
        Ids ordered from ``tree_node`` to the root
    """
    ids = []
    current = tree_node
    while current is not None:
        ids.append(current.injector.id)
        current = current.parent
    return ids


def generate_edge_ids(ids: Sequence[str]) -> List[str]:
    """Build ``"a-to-b"`` connector ids for each consecutive pair of ids."""
    return [f"{ids[i]}-to-{ids[i + 1]}" for i in range(len(ids) - 1)]


def grab_injector_paths_from_forest(forest: Iterable[InspectedNode]) -> List[PathRecord]:
    """
    Extract one root-first chain per node of a directive forest.

    Nodes are visited depth-first in pre-order: a node comes before its
    children, and children keep their given order. Each chain is the node's
    resolution path reversed; nothing is shared or deduplicated across nodes.

    Args:
        forest: Root nodes of the inspected application

    Returns:
        List of PathRecord in visit order
    """
    paths: List[PathRecord] = []
    stack = list(reversed(list(forest)))
    while stack:
        node = stack.pop()
        paths.append(PathRecord(node=node, path=list(reversed(node.resolution_path))))
        stack.extend(reversed(node.children))

    logger.debug(f"Extracted {len(paths)} injector paths from forest")
    return paths


def _starting_element_entry(path: List[InjectorDescriptor]) -> Optional[Tuple[str, List[InjectorDescriptor]]]:
    """
    Find where resolution starts for a root-first chain.

    Returns the id of the element injector resolution begins at (the
    innermost one) together with the environment injectors preceding the
    chain's element section, ordered nearest first. None if the chain has no
    element injector.
    """
    first_element_index = None
    starting_element_id = None
    for index, injector in enumerate(path):
        if injector.type != InjectorType.ELEMENT:
            continue
        if first_element_index is None:
            first_element_index = index
        starting_element_id = injector.id

    if first_element_index is None:
        return None

    environment_prefix = [
        injector for injector in path[:first_element_index]
        if injector.type == InjectorType.ENVIRONMENT
    ]
    environment_prefix.reverse()
    return starting_element_id, environment_prefix


def split_injector_paths(paths: Iterable[PathRecord]) -> SplitPaths:
    """
    Split root-first chains into element and environment chains.

    Both filtered lists stay aligned with the input: one record per input
    record, even when filtering leaves an empty chain. Null injectors are
    dropped from both.

    The starting-element index is first writer wins: chains sharing a
    starting element share the same environment ancestry upstream.

    Args:
        paths: Records produced by grab_injector_paths_from_forest

    Returns:
        SplitPaths with both filtered lists and the starting-element index
    """
    result = SplitPaths()

    for record in paths:
        element_path = [inj for inj in record.path if inj.type == InjectorType.ELEMENT]
        environment_path = [inj for inj in record.path if inj.type == InjectorType.ENVIRONMENT]
        result.element_paths.append(PathRecord(node=record.node, path=element_path))
        result.environment_paths.append(PathRecord(node=record.node, path=environment_path))

        entry = _starting_element_entry(record.path)
        if entry is None:
            continue
        starting_element_id, environment_prefix = entry
        result.starting_element_to_environment_path.setdefault(starting_element_id, environment_prefix)

    logger.debug(
        f"Split {len(result.element_paths)} paths; "
        f"{len(result.starting_element_to_environment_path)} starting elements indexed"
    )
    return result


def transform_paths_into_tree(paths: Iterable[PathRecord]) -> TreeNode:
    """
    Merge root-first chains into one tree under a hidden root.

    Each chain is walked from the hidden root; at every step the child with
    the same injector id is reused, otherwise a new child is appended.
    Children keep first-seen order. The last node a chain reaches records the
    chain's origin node; a later chain ending at the same node overwrites it.

    Args:
        paths: Records to merge, in order

    Returns:
        The hidden root of a freshly built tree
    """
    root = TreeNode(injector=HIDDEN_ROOT_INJECTOR)

    for record in paths:
        current = root
        for injector in record.path:
            child = current.find_child(injector.id)
            if child is None:
                child = current.add_child(injector)
            current = child
        if current is not root:
            current.node = record.node

    return root


def build_injector_trees(forest: Iterable[InspectedNode]) -> Tuple[TreeNode, TreeNode, SplitPaths]:
    """
    Run the whole pipeline for a forest.

    Returns:
        Tuple of (element tree root, environment tree root, split result)
    """
    paths = grab_injector_paths_from_forest(forest)
    split = split_injector_paths(paths)
    element_tree = transform_paths_into_tree(split.element_paths)
    environment_tree = transform_paths_into_tree(split.environment_paths)
    logger.info(
        f"Built injector trees from {len(paths)} nodes: "
        f"{len(element_tree.children)} element roots, "
        f"{len(environment_tree.children)} environment roots"
    )
    return element_tree, environment_tree, split
