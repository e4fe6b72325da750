import json
from pathlib import Path

import pytest
import yaml

from copyrec.errors import InvalidPictureError
from copyrec.layout.loader import (
    Declaration,
    LayoutSpec,
    build_layout,
    load_layout,
    load_layout_spec,
    sample_layout,
)

LAYOUT_YAML = """
name: orders
codepage: cp037
fields:
  - {level: 1, name: ORDER}
  - {level: 5, name: ORDER-ID, pic: 9(6)}
  - {level: 5, name: LINES, occurs: 3}
  - {level: 10, name: SKU, pic: X(8)}
  - {level: 10, name: QTY, pic: 9(3)}
"""


def test_load_layout_from_yaml(tmp_path: Path):
    path = tmp_path / "orders.yaml"
    path.write_text(LAYOUT_YAML)
    spec, layout = load_layout(path)
    assert spec.name == "orders"
    assert spec.codepage == "cp037"
    assert spec.fields[2] == Declaration(level=5, name="LINES", pic=None, occurs=3)
    assert layout.size == 6 + 3 * 11
    assert layout.field("QTY", 3).offset == 6 + 2 * 11 + 8


def test_load_layout_from_json(tmp_path: Path):
    path = tmp_path / "orders.json"
    path.write_text(json.dumps(yaml.safe_load(LAYOUT_YAML)))
    spec = load_layout_spec(path)
    assert [d.name for d in spec.fields] == ["ORDER", "ORDER-ID", "LINES", "SKU", "QTY"]


def test_layout_spec_defaults():
    spec = LayoutSpec.from_mapping({"name": "x", "fields": [{"level": 1, "name": "ROOT"}]})
    assert spec.codepage == "latin-1"
    assert spec.fields == [Declaration(level=1, name="ROOT")]


def test_missing_keys_raise():
    with pytest.raises(KeyError):
        LayoutSpec.from_mapping({"fields": []})
    with pytest.raises(KeyError):
        LayoutSpec.from_mapping({"name": "x", "fields": [{"name": "ROOT"}]})


def test_build_errors_propagate():
    with pytest.raises(InvalidPictureError):
        build_layout([Declaration(level=1, name="ROOT"), Declaration(5, "BAD", pic="Y(2)")])


def test_sample_layout_builds():
    spec = LayoutSpec.from_mapping(sample_layout())
    layout = build_layout(spec.fields)
    assert layout.size == 6 + 20 + 2 * (1 + 9) + 8
    assert "PHONE-NUMBER(2)" in layout
