"""Stats command for summarising an injector snapshot."""

import logging
from typing import Dict, List

from ..injector_tree import split_injector_paths
from ..models import InjectorType, PathRecord
from ..parsers import ForestParser

logger = logging.getLogger(__name__)


def collect_stats(paths: List[PathRecord]) -> Dict[str, int]:
    """Compute counts over a list of root-first path records.

    Args:
        paths: Records for every inspected node

    Returns:
        Mapping of statistic name to value
    """
    distinct: Dict[InjectorType, set] = {
        InjectorType.ELEMENT: set(),
        InjectorType.ENVIRONMENT: set(),
        InjectorType.NULL: set(),
    }
    for record in paths:
        for injector in record.path:
            distinct.setdefault(injector.type, set()).add(injector.id)

    split = split_injector_paths(paths)

    return {
        'nodes': len(paths),
        'element_injectors': len(distinct[InjectorType.ELEMENT]),
        'environment_injectors': len(distinct[InjectorType.ENVIRONMENT]),
        'null_injectors': len(distinct[InjectorType.NULL]),
        'max_depth': max((len(record.path) for record in paths), default=0),
        'starting_elements': len(split.starting_element_to_environment_path),
    }


def show_stats(source: str) -> None:
    """Print statistics about a forest or paths snapshot.

    Args:
        source: Path or URL of the snapshot
    """
    _, paths = ForestParser.load(source)
    stats = collect_stats(paths)

    print("Injector Statistics:")
    print(f"  Inspected Nodes: {stats['nodes']}")
    print(f"  Element Injectors: {stats['element_injectors']}")
    print(f"  Environment Injectors: {stats['environment_injectors']}")
    print(f"  Null Injectors: {stats['null_injectors']}")
    print(f"  Deepest Chain: {stats['max_depth']}")
    print(f"  Starting Elements: {stats['starting_elements']}")
