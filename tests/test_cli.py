"""Tests for the voxgen command-line interface."""

import json

import pytest

from voxgen.cli import build_parser, main
from voxgen.formats import read_vox
from voxgen.pipeline import Renderer


def test_presets(capsys):
    assert main(["presets"]) == 0
    out = capsys.readouterr().out
    assert "dragon:" in out
    assert "rule:  L→L+R+" in out


def test_derive(capsys):
    assert main(["derive", "--axiom", "F", "--rule", "F→F+F", "-n", "2"]) == 0
    assert capsys.readouterr().out.strip() == "F+F+F+F"


def test_derive_preset(capsys):
    assert main(["derive", "--preset", "hilbert", "-n", "1"]) == 0
    assert capsys.readouterr().out.strip() == "+BF-AFA-FB+"


def test_render_and_inspect(tmp_path, capsys):
    args = ["render", "--axiom", "F", "--name", "line", "-n", "0", "--output-dir", str(tmp_path)]
    assert main(args) == 0
    out = capsys.readouterr().out
    assert "line_0.vox" in out

    vox_path = tmp_path / "line_0.vox"
    assert vox_path.exists()
    assert (tmp_path / "line_0.json").exists()
    assert read_vox(vox_path).num_voxels == 3

    assert main(["inspect", str(vox_path)]) == 0
    out = capsys.readouterr().out
    assert "Voxels: 3" in out
    assert "Size: 64 x 64 x 64" in out


def test_render_options(tmp_path):
    """Explicit options override the preset's tuned settings."""
    output = tmp_path / "dragon.vox"
    args = [
        "render", "--preset", "dragon", "-n", "3", "--no-rainbow",
        "--size-x", "32", "--size-y", "32", "--size-z", "4",
        "--offset-x", "0", "--offset-y", "0",
        "-o", str(output), "--no-metadata",
    ]
    assert main(args) == 0

    model = read_vox(output)
    assert model.size == (32, 32, 4)
    assert model.num_colors == 1
    assert not output.with_suffix(".json").exists()


def test_render_angle_in_degrees(tmp_path):
    args = [
        "render", "--axiom", "+F", "--angle", "90", "-n", "0",
        "--output-dir", str(tmp_path), "--name", "turn", "--no-metadata",
    ]
    assert main(args) == 0
    # Starting north, a 90 degree left turn heads west.
    model = read_vox(tmp_path / "turn_0.vox")
    assert sorted(model.voxels[:, 0].tolist()) == [30, 31, 32]


def test_grammar_file(tmp_path, capsys):
    grammar = tmp_path / "g.json"
    grammar.write_text(
        json.dumps({"name": "g", "axiom": "FA", "productions": ["A→+F"]}),
        encoding="utf-8",
    )
    assert main(["derive", "--grammar", str(grammar), "-n", "1"]) == 0
    assert capsys.readouterr().out.strip() == "F+F"


@pytest.mark.parametrize("args", [
    ["derive", "--axiom", "FX"],
    ["derive", "--preset", "no-such-curve"],
    ["derive", "--preset", "dragon", "--rule", "L→F"],
    ["derive", "--axiom", "F", "-n", "-1"],
    ["render", "--axiom", "F", "--size-x", "0"],
])
def test_errors_exit_2(args, capsys):
    assert main(args) == 2
    assert "error:" in capsys.readouterr().err


def test_off_canvas_render_fails(tmp_path, capsys):
    args = ["render", "--axiom", "F", "--step-size", "100", "--output-dir", str(tmp_path)]
    assert main(args) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_file_exit_1(tmp_path, capsys):
    assert main(["inspect", str(tmp_path / "missing.vox")]) == 1


def test_grammar_source_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["render"])


def test_unknown_preset_message(capsys):
    assert main(["derive", "--preset", "no-such-curve"]) == 2
    err = capsys.readouterr().err
    assert err.startswith("error: Unknown preset 'no-such-curve'")
    assert "dragon" in err


def test_unexpected_errors_propagate(monkeypatch):
    """Errors that are not voxgen errors are bugs, not bad input."""

    def broken_render(self, l_system, output_path=None):
        raise ValueError("internal failure")

    monkeypatch.setattr(Renderer, "render_to_file", broken_render)
    with pytest.raises(ValueError, match="internal failure"):
        main(["render", "--axiom", "F"])


def test_inspect_shows_metadata(tmp_path, capsys):
    args = ["render", "--preset", "dragon", "-n", "2", "--output-dir", str(tmp_path)]
    assert main(args) == 0
    capsys.readouterr()

    assert main(["inspect", str(tmp_path / "dragon_2.vox")]) == 0
    out = capsys.readouterr().out
    assert "Grammar: dragon (axiom L)" in out
    assert "Generations: 2" in out


def test_inspect_ignores_broken_metadata(tmp_path, capsys):
    args = ["render", "--axiom", "F", "--name", "line", "-n", "0", "--output-dir", str(tmp_path)]
    assert main(args) == 0
    (tmp_path / "line_0.json").write_text("{broken", encoding="utf-8")
    capsys.readouterr()

    assert main(["inspect", str(tmp_path / "line_0.vox")]) == 0
    out = capsys.readouterr().out
    assert "Voxels: 3" in out
    assert "Grammar:" not in out
