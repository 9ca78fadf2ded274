import os

import pytest

from kepgen.config.constants import DEFAULT_CSV_FILENAME, DEFAULT_JSON_FILENAME
from kepgen.controllers import AppController, Hierarchy
from kepgen.errors import LoadError, NoTagsError
from kepgen.models import TagDataType


def test_starts_with_empty_root():
    controller = AppController()
    assert controller.hierarchy.root.name == "Root"
    assert controller.tags() == []


def test_edits_delegate_to_hierarchy():
    controller = AppController()
    root = controller.hierarchy.root_id
    line = controller.add_folder(root, "Line1")
    controller.add_tag(line, "Speed", TagDataType.INTEGER)
    copy = controller.duplicate(line)
    controller.rename(copy, "Line2")
    controller.remove(controller.hierarchy.find("Line1/Speed"))
    assert controller.move(controller.hierarchy.find("Line2/Speed"), line)
    assert [r.full_name for r in controller.tags()] == ["Line1.Speed"]


def test_csv_text(controller):
    lines = controller.csv_text().splitlines()
    assert lines[1] == "Line1.Speed,D0000,integer,1,R/W,100,,,,,,,,,,,"
    assert lines[2] == "Line1.Running,D0000.0,boolean,1,R/W,100,,,,,,,,,,,"


def test_csv_text_without_tags():
    with pytest.raises(NoTagsError):
        AppController().csv_text()


def test_export_csv_into_directory_uses_default_name(controller, tmp_path):
    path = controller.export_csv(str(tmp_path))
    assert path == os.path.join(str(tmp_path), DEFAULT_CSV_FILENAME)
    assert os.path.exists(path)


def test_export_csv_default_path(controller, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert controller.export_csv() == DEFAULT_CSV_FILENAME
    assert (tmp_path / DEFAULT_CSV_FILENAME).exists()


def test_save_and_load_round_trip(plant_hierarchy, tmp_path):
    target = str(tmp_path / "plant.json")
    AppController(plant_hierarchy).save_hierarchy(target)

    controller = AppController()
    loaded = controller.load_hierarchy(target)
    assert loaded is controller.hierarchy
    assert controller.hierarchy == plant_hierarchy


def test_save_into_directory_uses_default_name(controller, tmp_path):
    path = controller.save_hierarchy(str(tmp_path))
    assert os.path.basename(path) == DEFAULT_JSON_FILENAME


def test_failed_load_keeps_current_hierarchy(controller, tmp_path):
    before = controller.hierarchy_json()
    original = controller.hierarchy
    bad = tmp_path / "bad.json"
    bad.write_text('{"name": "Root", "isFolder": true, "children": [{"name": "X"}]}', encoding="utf-8")

    with pytest.raises(LoadError):
        controller.load_hierarchy(str(bad))

    assert controller.hierarchy is original
    assert controller.hierarchy_json() == before


def test_failed_load_text_keeps_current_hierarchy(controller):
    before = controller.hierarchy_json()
    with pytest.raises(LoadError):
        controller.load_hierarchy_text("{broken")
    assert controller.hierarchy_json() == before


def test_missing_file_is_os_error(controller, tmp_path):
    before = controller.hierarchy_json()
    with pytest.raises(OSError):
        controller.load_hierarchy(str(tmp_path / "nope.json"))
    assert controller.hierarchy_json() == before


def test_new_hierarchy_resets(controller):
    controller.new_hierarchy()
    assert controller.hierarchy == Hierarchy()


def test_undecodable_file_is_load_error(controller, tmp_path):
    before = controller.hierarchy_json()
    bad = tmp_path / "binary.json"
    bad.write_bytes(b'{"name": "\xff\xfe", "isFolder": true}')
    with pytest.raises(LoadError) as exc:
        controller.load_hierarchy(str(bad))
    assert "UTF-8" in str(exc.value)
    assert controller.hierarchy_json() == before


def test_deep_hierarchy_exports(deep_hierarchy, tmp_path):
    controller = AppController(deep_hierarchy)
    assert controller.hierarchy_json().count('"isFolder": true') == 1501
    assert len(controller.csv_text().splitlines()) == 2
    assert os.path.exists(controller.save_hierarchy(str(tmp_path / "deep.json")))
