import csv
import io

import pytest

from kepgen.config.constants import CSV_FIELD_NAMES
from kepgen.controllers import Hierarchy, build_csv, export_tags_to_csv, flatten_tags
from kepgen.errors import NoTagsError
from kepgen.models import TagDataType, TagNode, TagRecord

HEADER = (
    "Tag Name,Address,Data Type,Respect Data Type,Client Access,Scan Rate,Scaling,"
    "Raw Low,Raw High,Scaled Low,Scaled High,Scaled Data Type,Clamp Low,Clamp High,"
    "Eng Units,Description,Negate Value"
)


def rows(text):
    return text.splitlines()


# ----------------------------------------------------------------------
# flatten_tags
# ----------------------------------------------------------------------
def test_flatten_line_example(line_hierarchy):
    assert flatten_tags(line_hierarchy) == [
        TagRecord("Line1.Speed", TagDataType.INTEGER),
        TagRecord("Line1.Running", TagDataType.BOOLEAN),
    ]


def test_flatten_preorder_and_root_excluded(plant_hierarchy):
    assert [r.full_name for r in flatten_tags(plant_hierarchy)] == [
        "Version",
        "Area.Motor.Speed",
        "Area.Motor.Running",
        "Area.Label",
        "Pump.Fault",
    ]


def test_flatten_count_matches_tag_nodes(plant_hierarchy):
    tag_nodes = [n for _, n in plant_hierarchy.iter_preorder() if isinstance(n, TagNode)]
    assert len(flatten_tags(plant_hierarchy)) == len(tag_nodes) == plant_hierarchy.count_tags()


def test_flatten_only_empty_folders(hierarchy):
    a = hierarchy.add_folder(hierarchy.root_id, "A")
    hierarchy.add_folder(a, "B")
    assert flatten_tags(hierarchy) == []


def test_flatten_follows_moves(line_hierarchy):
    h = line_hierarchy
    other = h.add_folder(h.root_id, "Line2")
    h.move(h.find("Line1/Speed"), other)
    assert [r.full_name for r in flatten_tags(h)] == ["Line1.Running", "Line2.Speed"]


# ----------------------------------------------------------------------
# build_csv
# ----------------------------------------------------------------------
def test_build_csv_line_example(line_hierarchy):
    text = build_csv(flatten_tags(line_hierarchy))
    assert rows(text) == [
        HEADER,
        "Line1.Speed,D0000,integer,1,R/W,100,,,,,,,,,,,",
        "Line1.Running,D0000.0,boolean,1,R/W,100,,,,,,,,,,,",
    ]


def test_build_csv_uses_crlf(line_hierarchy):
    text = build_csv(flatten_tags(line_hierarchy))
    assert text.startswith(HEADER + "\r\n")
    assert text.endswith(",,\r\n")


def test_every_row_has_seventeen_columns(plant_hierarchy):
    parsed = list(csv.reader(io.StringIO(build_csv(flatten_tags(plant_hierarchy)))))
    assert parsed[0] == CSV_FIELD_NAMES
    assert all(len(row) == 17 for row in parsed)


def test_addresses_follow_record_order(plant_hierarchy):
    parsed = list(csv.DictReader(io.StringIO(build_csv(flatten_tags(plant_hierarchy)))))
    assert [(r["Tag Name"], r["Address"], r["Data Type"]) for r in parsed] == [
        ("Version", "S001", "string"),
        ("Area.Motor.Speed", "D0000", "integer"),
        ("Area.Motor.Running", "D0000.0", "boolean"),
        ("Area.Label", "S002", "string"),
        ("Pump.Fault", "D0000.1", "boolean"),
    ]


def test_each_export_starts_fresh_addresses(line_hierarchy):
    records = flatten_tags(line_hierarchy)
    assert build_csv(records) == build_csv(records)


def test_build_csv_empty_raises():
    with pytest.raises(NoTagsError):
        build_csv([])


def test_names_with_commas_are_quoted(hierarchy):
    folder = hierarchy.add_folder(hierarchy.root_id, "Line,1")
    hierarchy.add_tag(folder, 'Say "hi"', TagDataType.STRING)
    text = build_csv(flatten_tags(hierarchy))
    assert rows(text)[1] == '"Line,1.Say ""hi""",S001,string,1,R/W,100,,,,,,,,,,,'
    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed[1][0] == 'Line,1.Say "hi"'


# ----------------------------------------------------------------------
# export_tags_to_csv
# ----------------------------------------------------------------------
def test_export_writes_utf8_file(tmp_path):
    h = Hierarchy()
    folder = h.add_folder(h.root_id, "Kühlung")
    h.add_tag(folder, "Temperatur", TagDataType.INTEGER)
    target = tmp_path / "out" / "kepware_tags.csv"

    count = export_tags_to_csv(h, str(target))

    assert count == 1
    raw = target.read_bytes()
    assert not raw.startswith(b"\xef\xbb\xbf")
    assert raw.decode("utf-8").splitlines()[1].startswith("Kühlung.Temperatur,D0000,integer")
    assert b"\r\n" in raw and b"\r\r\n" not in raw


def test_export_without_tags_creates_no_file(tmp_path):
    h = Hierarchy()
    h.add_folder(h.root_id, "Empty")
    target = tmp_path / "kepware_tags.csv"
    with pytest.raises(NoTagsError):
        export_tags_to_csv(h, str(target))
    assert not target.exists()


def test_export_io_error_propagates(tmp_path, line_hierarchy):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OSError):
        export_tags_to_csv(line_hierarchy, str(blocker / "tags.csv"))


def test_deep_chain_flattens_and_exports(deep_hierarchy, tmp_path):
    records = flatten_tags(deep_hierarchy)
    assert len(records) == 1
    parts = records[0].full_name.split(".")
    assert len(parts) == 1501
    assert parts[:2] == ["F0", "F1"]
    assert parts[-2:] == ["F1499", "Speed"]

    lines = build_csv(records).splitlines()
    assert len(lines) == 2
    assert lines[1].startswith("F0.F1.F2.")
    assert lines[1].endswith(".F1499.Speed,D0000,integer,1,R/W,100,,,,,,,,,,,")
    assert export_tags_to_csv(deep_hierarchy, str(tmp_path / "deep.csv")) == 1
