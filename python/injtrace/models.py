"""Core data models for injtrace."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class InjectorType(str, Enum):
    """Kind of an injector as reported by the inspected application."""

    ELEMENT = "element"
    ENVIRONMENT = "environment"
    NULL = "null"
    HIDDEN = "hidden"  # Reserved for the synthetic root of a merged tree


HIDDEN_ROOT_ID = "N/A"


@dataclass(frozen=True, eq=False)
class InjectorDescriptor:
    """A single injector record: id, display name and kind."""

    id: str
    name: str
    type: InjectorType

    def __eq__(self, other) -> bool:
        # Two descriptors are the same injector iff their ids match
        if not isinstance(other, InjectorDescriptor):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


HIDDEN_ROOT_INJECTOR = InjectorDescriptor(id=HIDDEN_ROOT_ID, name="Hidden", type=InjectorType.HIDDEN)


@dataclass(eq=False)
class InspectedNode:
    """A node of the inspected application's directive forest.

    ``resolution_path`` lists the node's injectors nearest-first: its own
    injector first, the null injector last.
    """

    name: str
    component: Optional[Dict[str, Any]] = None
    directives: List[Dict[str, Any]] = field(default_factory=list)
    children: List['InspectedNode'] = field(default_factory=list)
    resolution_path: List[InjectorDescriptor] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"InspectedNode({self.name!r})"


@dataclass
class PathRecord:
    """An inspected node paired with a root-first injector chain."""

    node: Optional[InspectedNode]
    path: List[InjectorDescriptor]

    @property
    def ids(self) -> List[str]:
        return [injector.id for injector in self.path]


@dataclass(eq=False)
class TreeNode:
    """Represents a node in a merged injector tree."""

    injector: InjectorDescriptor
    children: List['TreeNode'] = field(default_factory=list)
    parent: Optional['TreeNode'] = field(default=None, repr=False)
    node: Optional[InspectedNode] = None
    _child_index: Dict[str, 'TreeNode'] = field(default_factory=dict, repr=False)

    @property
    def is_hidden(self) -> bool:
        return self.injector.type == InjectorType.HIDDEN

    def find_child(self, injector_id: str) -> Optional['TreeNode']:
        """Return the child holding ``injector_id``, if any."""
        return self._child_index.get(injector_id)

    def add_child(self, injector: InjectorDescriptor) -> 'TreeNode':
        """Append a new child for ``injector`` and return it."""
        child = TreeNode(injector=injector, parent=self)
        self.children.append(child)
        # First child with a given id stays addressable
        self._child_index.setdefault(injector.id, child)
        return child

    def walk(self):
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))
