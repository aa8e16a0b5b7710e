"""Tests for the core data models."""

from injtrace.models import (
    HIDDEN_ROOT_INJECTOR,
    InjectorDescriptor,
    InjectorType,
    TreeNode,
)


class TestInjectorDescriptor:
    """Tests for InjectorDescriptor identity."""

    def test_hash_follows_id(self):
        a = InjectorDescriptor(id='1', name='AppComponent', type=InjectorType.ELEMENT)
        b = InjectorDescriptor(id='1', name='Renamed', type=InjectorType.ENVIRONMENT)
        assert len({a, b}) == 1

    def test_not_equal_to_other_types(self):
        a = InjectorDescriptor(id='1', name='AppComponent', type=InjectorType.ELEMENT)
        assert a != '1'

    def test_str(self):
        a = InjectorDescriptor(id='2', name='AppModule', type=InjectorType.ENVIRONMENT)
        assert str(a) == 'AppModule (2)'

    def test_type_values(self):
        assert InjectorType('element') is InjectorType.ELEMENT
        assert InjectorType('environment') is InjectorType.ENVIRONMENT
        assert InjectorType('null') is InjectorType.NULL


class TestTreeNode:
    """Tests for TreeNode child bookkeeping."""

    def test_add_and_find_child(self):
        root = TreeNode(injector=HIDDEN_ROOT_INJECTOR)
        child = root.add_child(InjectorDescriptor(id='1', name='A', type=InjectorType.ELEMENT))

        assert root.find_child('1') is child
        assert root.find_child('2') is None
        assert child.parent is root
        assert root.is_hidden
        assert not child.is_hidden

    def test_walk_is_pre_order(self):
        root = TreeNode(injector=HIDDEN_ROOT_INJECTOR)
        a = root.add_child(InjectorDescriptor(id='a', name='a', type=InjectorType.ELEMENT))
        a.add_child(InjectorDescriptor(id='a1', name='a1', type=InjectorType.ELEMENT))
        root.add_child(InjectorDescriptor(id='b', name='b', type=InjectorType.ELEMENT))

        assert [node.injector.id for node in root.walk()] == [HIDDEN_ROOT_INJECTOR.id, 'a', 'a1', 'b']
