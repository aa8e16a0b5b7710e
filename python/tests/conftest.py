"""Shared fixtures: a small todo application forest.

AppComponent(1) -> DemoAppComponent(6) -> AppTodoComponent(9) -> TodosComponent(14),
with environment injectors AppModule(2), DemoAppModule(7), AppModule(10) and
HomeModule(15) above them and the null injector (0) at the root.
"""

import json

import pytest

from injtrace.models import InjectorDescriptor, InjectorType, InspectedNode

NULL = {'id': '0', 'name': 'Null Injector', 'type': 'null'}
APP_MODULE = {'id': '2', 'name': 'AppModule', 'type': 'environment'}
DEMO_APP_MODULE = {'id': '7', 'name': 'DemoAppModule', 'type': 'environment'}
LAZY_APP_MODULE = {'id': '10', 'name': 'AppModule', 'type': 'environment'}
HOME_MODULE = {'id': '15', 'name': 'HomeModule', 'type': 'environment'}
APP_COMPONENT = {'id': '1', 'name': 'AppComponent', 'type': 'element'}
DEMO_APP_COMPONENT = {'id': '6', 'name': 'DemoAppComponent', 'type': 'element'}
APP_TODO_COMPONENT = {'id': '9', 'name': 'AppTodoComponent', 'type': 'element'}
TODOS_COMPONENT = {'id': '14', 'name': 'TodosComponent', 'type': 'element'}


def _todo_forest_data():
    todos = {
        'name': 'app-todos',
        'component': {'name': 'TodosComponent'},
        'directives': [],
        'children': [],
        'resolutionPath': [TODOS_COMPONENT, APP_TODO_COMPONENT, DEMO_APP_COMPONENT, APP_COMPONENT,
                           HOME_MODULE, LAZY_APP_MODULE, DEMO_APP_MODULE, APP_MODULE, NULL],
    }
    app_todo = {
        'name': 'app-todo-demo',
        'component': {'name': 'AppTodoComponent'},
        'directives': [],
        'children': [todos],
        'resolutionPath': [APP_TODO_COMPONENT, DEMO_APP_COMPONENT, APP_COMPONENT,
                           LAZY_APP_MODULE, DEMO_APP_MODULE, APP_MODULE, NULL],
    }
    demo_app = {
        'name': 'app-demo',
        'component': {'name': 'DemoAppComponent'},
        'directives': [],
        'children': [app_todo],
        'resolutionPath': [DEMO_APP_COMPONENT, APP_COMPONENT, DEMO_APP_MODULE, APP_MODULE, NULL],
    }
    app = {
        'name': 'app-root',
        'component': {'name': 'AppComponent'},
        'directives': [],
        'children': [demo_app],
        'resolutionPath': [APP_COMPONENT, APP_MODULE, NULL],
    }
    return [app]


def _to_node(data):
    return InspectedNode(
        name=data['name'],
        component=data['component'],
        directives=data['directives'],
        children=[_to_node(child) for child in data['children']],
        resolution_path=[
            InjectorDescriptor(id=entry['id'], name=entry['name'], type=InjectorType(entry['type']))
            for entry in data['resolutionPath']
        ],
    )


@pytest.fixture
def todo_forest_data():
    """The todo forest as decoded JSON."""
    return _todo_forest_data()


@pytest.fixture
def todo_forest():
    """The todo forest as InspectedNode objects."""
    return [_to_node(node) for node in _todo_forest_data()]


@pytest.fixture
def todo_forest_file(tmp_path):
    """The todo forest written to a JSON file."""
    path = tmp_path / "forest.json"
    path.write_text(json.dumps({'forest': _todo_forest_data()}), encoding='utf-8')
    return path
