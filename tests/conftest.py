import pytest

from kepgen.controllers import AppController, Hierarchy
from kepgen.models import TagDataType


@pytest.fixture
def hierarchy():
    return Hierarchy()


@pytest.fixture
def line_hierarchy():
    """Root -> Line1 -> [Speed (Integer), Running (Boolean)]"""
    h = Hierarchy()
    line = h.add_folder(h.root_id, "Line1")
    h.add_tag(line, "Speed", TagDataType.INTEGER)
    h.add_tag(line, "Running", TagDataType.BOOLEAN)
    return h


@pytest.fixture
def plant_hierarchy():
    """A deeper tree mixing folders and tags at several levels."""
    h = Hierarchy()
    h.add_tag(h.root_id, "Version", TagDataType.STRING)
    area = h.add_folder(h.root_id, "Area")
    motor = h.add_folder(area, "Motor")
    h.add_tag(motor, "Speed", TagDataType.INTEGER)
    h.add_tag(motor, "Running", TagDataType.BOOLEAN)
    h.add_folder(motor, "Empty")
    h.add_tag(area, "Label", TagDataType.STRING)
    pump = h.add_folder(h.root_id, "Pump")
    h.add_tag(pump, "Fault", TagDataType.BOOLEAN)
    return h


@pytest.fixture
def controller(line_hierarchy):
    return AppController(line_hierarchy)


@pytest.fixture
def deep_hierarchy():
    """A single chain of 1500 folders, deeper than the default recursion limit, with one tag at the bottom."""
    h = Hierarchy()
    parent = h.root_id
    for i in range(1500):
        parent = h.add_folder(parent, f"F{i}")
    h.add_tag(parent, "Speed", TagDataType.INTEGER)
    return h
