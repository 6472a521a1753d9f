from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from uicontext import cli
from tests._fixtures.project_builder import ProjectBuilder


def test_build_parser_accepts_flags() -> None:
    parser = cli._build_parser()

    args = parser.parse_args(
        ["build", "src", "-o", "out.json", "--ignore", "a/**", "--ignore", "b/**", "--name", "Shop", "-v"]
    )

    assert args.command == "build"
    assert args.path == "src"
    assert args.output == "out.json"
    assert args.ignore == ["a/**", "b/**"]
    assert args.name == "Shop"
    assert args.verbose is True


def test_verbose_defaults_to_false() -> None:
    args = cli._build_parser().parse_args(["serve"])

    assert args.verbose is False
    assert args.context == "context.json"
    assert args.port == 3001


def test_build_writes_artifact_and_summary(
    project: ProjectBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write(
        {
            "App.tsx": """
                export default function App() {
                    return <Header />;
                }
            """,
            "Header.tsx": "export const Header = () => <h1 />;\n",
        }
    )
    output = tmp_path / "context.json"

    cli.main(["build", str(project.root), "-o", str(output)])

    out = capsys.readouterr().out
    assert "Found 1 root component(s)" in out
    assert "Total components: 2" in out
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["name"] == "app"
    assert len(data["rootComponents"]) == 1


def test_build_missing_root_writes_empty_artifact(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output = tmp_path / "context.json"

    cli.main(["build", str(tmp_path / "missing"), "-o", str(output)])

    assert "Total components: 0" in capsys.readouterr().out
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["components"] == {}
    assert data["rootComponents"] == []
    assert data["translations"] == {}


def test_log_file_receives_records(project: ProjectBuilder, tmp_path: Path) -> None:
    project.write({"Card.tsx": "export const Card = () => <div />;\n"})
    log_file = tmp_path / "logs" / "uicontext.log"

    cli.main(["--log-file", str(log_file), "-v", "build", str(project.root), "-o", str(tmp_path / "context.json")])
    logging.getLogger("uicontext").handlers[-1].flush()

    content = log_file.read_text(encoding="utf-8")
    assert "INFO uicontext.analyzer: Found 1 component source files" in content
    assert "DEBUG uicontext.analyzer: Extracted 1 components" in content


def test_log_file_flag_defaults_to_none() -> None:
    assert cli._build_parser().parse_args(["serve"]).log_file is None


def test_mock_prints_sample_props(
    project: ProjectBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project.write(
        {
            "Card.tsx": """
                interface CardProps {
                    title: string;
                    userId: string;
                    onSelect: () => void;
                }

                export const Card = ({ title, userId, onSelect }: CardProps) => <div />;
            """,
        }
    )
    output = tmp_path / "context.json"
    cli.main(["build", str(project.root), "-o", str(output)])
    component_id = next(iter(json.loads(output.read_text(encoding="utf-8"))["components"]))
    capsys.readouterr()

    cli.main(["mock", str(output), component_id])

    values = json.loads(capsys.readouterr().out)
    assert values["title"] == "random string"
    assert len(values["userId"]) == 36
    assert values["onSelect"] == "[function onSelect]"


def test_mock_reports_missing_artifact_and_unknown_component(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit):
        cli.main(["mock", str(tmp_path / "context.json"), "Card_deadbeef"])
    assert "Run 'uicontext build' first" in capsys.readouterr().err

    artifact = tmp_path / "context.json"
    artifact.write_text(json.dumps({"components": {}}), encoding="utf-8")
    with pytest.raises(SystemExit):
        cli.main(["mock", str(artifact), "Card_deadbeef"])
    assert "Unknown component: Card_deadbeef" in capsys.readouterr().err
