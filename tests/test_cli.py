from click.testing import CliRunner

from quire import __version__
from quire.cli import cli

from conftest import page, write


def test_compile_command(make_project):
    root = make_project()
    runner = CliRunner()

    result = runner.invoke(cli, ["compile", str(root), "--env", "production"])

    assert result.exit_code == 0, result.output
    assert f'The project at "{root}" has been compiled.' in result.output
    assert "Built 5 pages" in result.output
    assert (root / "dist" / "index.html").exists()


def test_compile_reads_environment_variable(make_project):
    root = make_project()
    runner = CliRunner()

    result = runner.invoke(
        cli, ["compile", str(root)], env={"QUIRE_ENV": "development"}
    )

    assert result.exit_code == 0, result.output
    about = (root / "dist" / "posts" / "first" / "index.html").read_text()
    assert 'data-base="http://localhost:8000"' in about


def test_compile_without_environment_fails(make_project):
    root = make_project()
    runner = CliRunner()

    result = runner.invoke(cli, ["compile", str(root)], env={"QUIRE_ENV": None})

    assert result.exit_code == 1
    assert "Build failed:" in result.output
    assert "production" in result.output
    assert not (root / "dist").exists()


def test_compile_reports_offending_file(make_project):
    root = make_project()
    write(root / "orphan.markdown", page("nonexistent", "x"))
    runner = CliRunner()

    result = runner.invoke(cli, ["compile", str(root), "--env", "production"])

    assert result.exit_code == 1
    assert "File: orphan.markdown" in result.output
    assert 'The requested layout "nonexistent" could not be found.' in result.output


def test_clean_command(make_project):
    root = make_project()
    runner = CliRunner()
    runner.invoke(cli, ["compile", str(root), "--env", "production"])

    result = runner.invoke(cli, ["clean", str(root)])
    assert result.exit_code == 0
    assert "has been cleaned." in result.output
    assert not (root / "dist").exists()

    result = runner.invoke(cli, ["clean", str(root)])
    assert result.exit_code == 0
    assert "had nothing to clean." in result.output


def test_clean_without_config(tmp_path):
    runner = CliRunner()

    result = runner.invoke(cli, ["clean", str(tmp_path)])

    assert result.exit_code == 1
    assert "Clean failed:" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_compile_reports_undecodable_content(make_project):
    root = make_project()
    (root / "broken.markdown").write_bytes(b"---\nlayout: default\n---\n\xff\xfe\n")

    result = CliRunner().invoke(cli, ["compile", str(root), "--env", "production"])

    assert result.exit_code == 1
    assert "Build failed:" in result.output
    assert "File: broken.markdown" in result.output


def test_compile_reports_file_in_place_of_output_directory(make_project):
    root = make_project()
    (root / "dist").write_text("x")

    result = CliRunner().invoke(cli, ["compile", str(root), "--env", "production"])

    assert result.exit_code == 1
    assert "Build failed:" in result.output
    assert "is not a directory" in result.output
