import os
import shutil
import subprocess
from pathlib import Path


def _run_cli(args, cwd: Path):
    env = os.environ.copy()
    pythonpath = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = str(Path("src").resolve()) + (os.pathsep + pythonpath if pythonpath else "")
    result = subprocess.run(
        ["python3", "-m", "cli", *args],
        cwd=cwd,
        env=env,
        check=False,
        capture_output=True,
        text=True,
    )
    return result


def test_cli_formats_to_output_file(tmp_path):
    output_path = tmp_path / "out.ex"
    result = _run_cli(
        ["format", "tests/cases/messy.ex", "--out", str(output_path)],
        cwd=Path("."),
    )
    assert result.returncode == 0, result.stderr
    content = output_path.read_text(encoding="utf-8")
    assert "def calc(a, b), do: (a + b) * 2" in content
    assert "if x > 0, do: :pos, else: :neg" in content


def test_cli_rewrites_in_place(tmp_path):
    target = tmp_path / "messy.ex"
    shutil.copy("tests/cases/messy.ex", target)
    result = _run_cli(["format", str(target)], cwd=Path("."))
    assert result.returncode == 0, result.stderr
    assert "list |> Enum.reverse()" in target.read_text(encoding="utf-8")


def test_cli_check_mode(tmp_path):
    formatted = _run_cli(["format", "tests/cases/shapes.ex", "--check"], cwd=Path("."))
    assert formatted.returncode == 0, formatted.stderr

    target = tmp_path / "messy.ex"
    shutil.copy("tests/cases/messy.ex", target)
    original = target.read_text(encoding="utf-8")
    unformatted = _run_cli(["format", str(target), "--check"], cwd=Path("."))
    assert unformatted.returncode == 1
    assert "File is not formatted." in unformatted.stderr
    assert target.read_text(encoding="utf-8") == original


def test_cli_strict_mode_fails_on_unplaced_comment(tmp_path):
    source_path = tmp_path / "lost.ex"
    source_path.write_text("[\n  1\n  # lost\n]\n", encoding="utf-8")
    output_path = tmp_path / "lost_out.ex"

    relaxed = _run_cli(["format", str(source_path), "--out", str(output_path)], cwd=Path("."))
    assert relaxed.returncode == 0, relaxed.stderr
    assert "WARNING" in relaxed.stderr

    strict = _run_cli(["format", str(source_path), "--out", str(output_path), "--strict"], cwd=Path("."))
    assert strict.returncode == 1


def test_cli_parenless_option(tmp_path):
    source_path = tmp_path / "router.ex"
    source_path.write_text("plug :auth\n", encoding="utf-8")
    result = _run_cli(["format", str(source_path), "--parenless", "plug"], cwd=Path("."))
    assert result.returncode == 0, result.stderr
    assert source_path.read_text(encoding="utf-8") == "plug :auth\n"


def test_cli_reports_parse_errors(tmp_path):
    source_path = tmp_path / "broken.ex"
    source_path.write_text("foo(\n", encoding="utf-8")
    result = _run_cli(["format", str(source_path)], cwd=Path("."))
    assert result.returncode == 1
    assert "Parsing failed" in result.stderr
    assert source_path.read_text(encoding="utf-8") == "foo(\n"


def test_cli_missing_input():
    result = _run_cli(["format", "tests/cases/missing.ex"], cwd=Path("."))
    assert result.returncode == 1
    assert "Input file not found" in result.stderr
