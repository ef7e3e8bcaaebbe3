"""Shared test fixtures for Remodular."""

import pytest

from remodular.graph.models import ClassUnit, MethodUnit


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def make_class():
    """Factory: make_class("A", {"run": ["b1:0"], "b1": []}) -> ClassUnit.

    Method specs map a method name to its call signatures; every method
    takes no parameters unless given as (name, params) tuple keys.
    """

    def _make(name, methods=None, package=""):
        units = []
        for spec, calls in (methods or {}).items():
            if isinstance(spec, tuple):
                method_name, params = spec
            else:
                method_name, params = spec, 0
            units.append(MethodUnit(name=method_name, parameter_count=params, call_signatures=list(calls)))
        return ClassUnit(name=name, package=package, methods=units)

    return _make


@pytest.fixture
def three_classes(make_class):
    """A, B, C with raw inter-class matches A-B=6, A-C=2, B-C=2 (total 10)."""
    a = make_class(
        "A",
        {"run": ["b1:0", "b2:0", "b3:0", "c1:0"], "a1": [], "a2": [], "a3": [], "a4": []},
    )
    b = make_class(
        "B",
        {"work": ["a1:0", "a2:0", "a3:0", "c2:0"], "b1": [], "b2": [], "b3": [], "b4": []},
    )
    c = make_class("C", {"go": ["a4:0", "b4:0"], "c1": [], "c2": []})
    return [a, b, c]


@pytest.fixture
def single_class(make_class):
    """One class whose only method calls nothing."""
    return [make_class("Solo", {"idle": []})]


@pytest.fixture
def isolated_pair(make_class):
    """Two classes that never call each other."""
    return [
        make_class("Left", {"l1": ["l2:0", "println:1"], "l2": []}),
        make_class("Right", {"r1": ["r1:0"]}),
    ]


@pytest.fixture
def model_document():
    """JSON-shaped class model with two packages and a library call."""
    return {
        "classes": [
            {
                "name": "OrderService",
                "package": "shop.orders",
                "attributes": 2,
                "methods": [
                    {"name": "place", "parameters": 1, "lines": 12,
                     "calls": ["save:1", "validate:1", "println:1"]},
                    {"name": "cancel", "parameters": 1, "lines": 5, "calls": ["delete:1"]},
                ],
            },
            {
                "name": "OrderRepository",
                "package": "shop.orders",
                "attributes": 1,
                "methods": [
                    {"name": "save", "parameters": 1, "lines": 4, "calls": []},
                    {"name": "delete", "parameters": 1, "lines": 3, "calls": []},
                ],
            },
            {
                "name": "Validator",
                "package": "shop.common",
                "methods": [
                    {"name": "validate", "parameters": 1, "lines": 8, "calls": ["log:1"]},
                ],
            },
            {
                "name": "AuditLog",
                "package": "shop.common",
                "methods": [{"name": "log", "parameters": 1, "lines": 2}],
            },
        ]
    }
