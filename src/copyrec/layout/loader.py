from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from copyrec.layout.builder import LayoutBuilder, RecordLayout
from copyrec.record import DEFAULT_CODEPAGE


@dataclass
class Declaration:
    level: int
    name: str
    pic: str | None = None
    occurs: int = 1

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> Declaration:
        return Declaration(
            level=int(payload["level"]),
            name=str(payload["name"]),
            pic=str(payload["pic"]) if payload.get("pic") is not None else None,
            occurs=int(payload.get("occurs", 1)),
        )


@dataclass
class LayoutSpec:
    name: str
    fields: list[Declaration] = field(default_factory=list)
    codepage: str = DEFAULT_CODEPAGE
    notes: str | None = None

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> LayoutSpec:
        return LayoutSpec(
            name=str(payload["name"]),
            fields=[Declaration.from_mapping(entry) for entry in payload["fields"]],
            codepage=str(payload.get("codepage") or DEFAULT_CODEPAGE),
            notes=payload.get("notes"),
        )


def build_layout(declarations: Iterable[Declaration]) -> RecordLayout:
    builder = LayoutBuilder()
    for decl in declarations:
        builder.declare(decl.level, decl.name, decl.pic, decl.occurs)
    return builder.finish()


def load_layout_spec(path: Path) -> LayoutSpec:
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text())
    else:
        payload = json.loads(path.read_text())
    return LayoutSpec.from_mapping(payload)


def load_layout(path: Path) -> tuple[LayoutSpec, RecordLayout]:
    """Read a YAML/JSON layout file and build its RecordLayout."""
    spec = load_layout_spec(path)
    return spec, build_layout(spec.fields)


def sample_layout() -> dict[str, Any]:
    return {
        "name": "customer",
        "codepage": DEFAULT_CODEPAGE,
        "notes": "edit with real field names",
        "fields": [
            {"level": 1, "name": "CUSTOMER"},
            {"level": 5, "name": "CUST-ID", "pic": "9(6)"},
            {"level": 5, "name": "CUST-NAME", "pic": "X(20)"},
            {"level": 5, "name": "PHONES", "occurs": 2},
            {"level": 10, "name": "PHONE-TYPE", "pic": "X(1)"},
            {"level": 10, "name": "PHONE-NUMBER", "pic": "9(9)"},
            {"level": 5, "name": "BALANCE", "pic": "9(8)"},
        ],
    }
