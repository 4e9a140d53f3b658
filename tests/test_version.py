from typer.testing import CliRunner

import cmdinclude
from cmdinclude.ui.cli import app


def test_get_version_matches_public_api() -> None:
    assert cmdinclude.get_version() == cmdinclude.__version__
    assert isinstance(cmdinclude.__version__, str)


def test_cli_version_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0, result.stdout
    assert result.stdout.strip() == cmdinclude.get_version()
