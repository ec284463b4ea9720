"""Tests for the ``pathplot`` command line.

Runs ``main(argv)`` in-process against job files written to tmp_path.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

import pytest
import yaml

from pathplot.cli import main
from pathplot.utils.logging_config import pop_context, setup_logging


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    setup_logging("WARNING", to_stderr=False, capture_warnings=False)
    logging.captureWarnings(False)
    pop_context()


@pytest.fixture()
def job_data() -> dict:
    return {
        "schema_version": "plot_job.v1",
        "name": "flowers",
        "paper": {"min_x": 0, "max_x": 2, "min_y": 0, "max_y": 2},
        "options": {"pen_down_speed": 30},
        "layers": [
            {
                "name": "outline",
                "curves": [
                    {"type": "line", "start": [0, 0], "end": [1, 1]},
                    {"type": "arc", "center": [1, 1], "radius": 0.5,
                     "start_angle": 0, "end_angle": 1.5707963267948966},
                ],
            },
            {
                "name": "dots",
                "curves": [{"type": "circle", "center": [1, 1], "radius": 0.1}],
            },
        ],
    }


def _write_job(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "job.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Success paths
# ---------------------------------------------------------------------------


class TestRender:
    def test_writes_named_document(self, tmp_path: Path, job_data: dict, capsys) -> None:
        job = _write_job(tmp_path, job_data)
        out_dir = tmp_path / "out"
        assert main(["render", str(job), "--out-dir", str(out_dir)]) == 0

        doc = out_dir / "flowers.svg"
        assert doc.exists()
        text = doc.read_text(encoding="utf-8")
        assert text.startswith('<?xml version="1.0"')
        assert 'd="M0,144 L72,72"' in text
        assert "<circle " in text

        stdout = capsys.readouterr().out.splitlines()
        assert stdout == [str(doc.resolve())]

    def test_command_printed_with_plotter_config(
        self, tmp_path: Path, job_data: dict, capsys,
    ) -> None:
        job = _write_job(tmp_path, job_data)
        conf = tmp_path / "axi conf.py"
        rc = main([
            "render", str(job),
            "--out-dir", str(tmp_path),
            "--plotter-config", str(conf),
        ])
        assert rc == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        doc = (tmp_path / "flowers.svg").resolve()
        assert lines[1] == (
            f'axicli "{doc}" --config "{conf.resolve()}" '
            "-s30 -S75 -a75 -r50 -R75 -T"
        )

    def test_name_and_layer_override(self, tmp_path: Path, job_data: dict) -> None:
        job = _write_job(tmp_path, job_data)
        rc = main([
            "render", str(job), "-o", str(tmp_path), "--name", "dots_only", "--layer", "dots",
        ])
        assert rc == 0
        text = (tmp_path / "dots_only.svg").read_text(encoding="utf-8")
        assert "<circle " in text
        assert "<path " not in text

    def test_layer_index(self, tmp_path: Path, job_data: dict) -> None:
        job = _write_job(tmp_path, job_data)
        assert main(["render", str(job), "-o", str(tmp_path), "-l", "0"]) == 0
        text = (tmp_path / "flowers.svg").read_text(encoding="utf-8")
        assert "<circle " not in text

    def test_timestamp_name_when_unnamed(self, tmp_path: Path, job_data: dict) -> None:
        del job_data["name"]
        job = _write_job(tmp_path, job_data)
        out_dir = tmp_path / "out"
        assert main(["render", str(job), "-o", str(out_dir)]) == 0
        names = [p.name for p in out_dir.iterdir()]
        assert len(names) == 1
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}\.svg", names[0])

    def test_infinite_option_clamped(self, tmp_path: Path, job_data: dict, capsys) -> None:
        job_data["options"] = {"pen_down_speed": float("inf")}
        job = _write_job(tmp_path, job_data)
        conf = tmp_path / "axi.py"
        rc = main(["render", str(job), "-o", str(tmp_path), "--plotter-config", str(conf)])
        assert rc == 0
        assert " -s110 " in capsys.readouterr().out

    def test_exact_arcs(self, tmp_path: Path, job_data: dict) -> None:
        job = _write_job(tmp_path, job_data)
        assert main(["render", str(job), "-o", str(tmp_path), "--exact-arcs"]) == 0
        text = (tmp_path / "flowers.svg").read_text(encoding="utf-8")
        assert 'd="M108,72 A36,36 0 0 0 72,36"' in text

    def test_json_logs(self, tmp_path: Path, job_data: dict, capsys) -> None:
        job = _write_job(tmp_path, job_data)
        assert main(["render", str(job), "-o", str(tmp_path), "--json-logs"]) == 0
        err = capsys.readouterr().err
        records = [json.loads(line) for line in err.splitlines() if line.startswith("{")]
        assert records
        assert all(r["app"] == "pathplot" for r in records)
        assert any(r.get("job") == "flowers" for r in records)


# ---------------------------------------------------------------------------
# Failure paths
# ---------------------------------------------------------------------------


class TestErrors:
    def test_missing_job_file(self, tmp_path: Path, capsys) -> None:
        assert main(["render", str(tmp_path / "nope.yaml")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_job(self, tmp_path: Path, job_data: dict) -> None:
        job_data["paper"]["max_x"] = -1
        job = _write_job(tmp_path, job_data)
        assert main(["render", str(job), "-o", str(tmp_path)]) == 1

    def test_unknown_layer(self, tmp_path: Path, job_data: dict, capsys) -> None:
        job = _write_job(tmp_path, job_data)
        assert main(["render", str(job), "-o", str(tmp_path), "--layer", "hatch"]) == 1
        assert "hatch" in capsys.readouterr().err
        assert not (tmp_path / "flowers.svg").exists()

    def test_strict_degenerate(self, tmp_path: Path, job_data: dict) -> None:
        job_data["layers"][0]["curves"].append({"type": "polyline", "points": [[0, 0]]})
        job = _write_job(tmp_path, job_data)
        assert main(["render", str(job), "-o", str(tmp_path), "--strict"]) == 1
        assert main(["render", str(job), "-o", str(tmp_path)]) == 0

    def test_bad_config(self, tmp_path: Path, job_data: dict) -> None:
        job = _write_job(tmp_path, job_data)
        conf = tmp_path / "plotter.yaml"
        conf.write_text("device: {}\n", encoding="utf-8")
        assert main(["render", str(job), "--config", str(conf)]) == 1

    def test_usage_error_exits_2(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["render"])
        assert exc.value.code == 2
