from __future__ import annotations

from pathlib import Path

import pytest

from uicontext.models import ComponentRecord, ContextApp, PropDescriptor
from uicontext.stores import ContextNotFoundError, read_context, write_context


def test_write_then_read(tmp_path: Path) -> None:
    record = ComponentRecord(
        id="Card_1a2b3c4d",
        path="/app/Card.tsx",
        name="Card",
        props=[PropDescriptor(name="rating", type="Rating", enum_values={"Bad": 0, "Good": 1})],
    )
    app = ContextApp(
        name="shop",
        root_dir="/app",
        components={record.id: record},
        root_components=[record.id],
        translations={},
    )

    data = read_context(write_context(app, tmp_path / "nested" / "context.json"))

    assert data["rootComponents"] == ["Card_1a2b3c4d"]
    assert data["components"]["Card_1a2b3c4d"]["props"] == [
        {"name": "rating", "type": "Rating", "enumValues": {"Bad": 0, "Good": 1}}
    ]
    assert "translationValues" not in data


def test_missing_artifact(tmp_path: Path) -> None:
    with pytest.raises(ContextNotFoundError, match="context.json not found"):
        read_context(tmp_path / "context.json")


def test_non_artifact_json_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "context.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ValueError):
        read_context(path)
