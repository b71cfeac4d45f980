import os

import pytest

from componentry import ComponentRegistry

COMPONENTS = os.path.join(os.path.dirname(os.path.abspath(__file__)), "components")


@pytest.fixture
def registry() -> ComponentRegistry:
    return ComponentRegistry(COMPONENTS, {"host": "localhost"})
