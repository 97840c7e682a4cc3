"""
Tests for cli.py and the subcommands

Invoke the randwall command group through click's CliRunner and check exit statuses, output and
what ends up saved in the config directory.

*** Fixtures ***
- state, desktop, image_dir (defined in conftest.py)
- runner, commands (defined below)
- tmp_path, monkeypatch (defined by Pytest)
"""

import json
import sys
from unittest.mock import Mock

import click
import pytest
from click.testing import CliRunner

from randwall import __version__
from randwall.cli import cli, main
from randwall.cli_utils.console import console
from randwall.cli_utils.utils import attach_commands, import_commands
from randwall.config import load_config
from randwall.exceptions import ExitCode
from randwall.history import HistoryStore, ImageHistory, ImageRecord
from randwall.wallpaper_handler import WallpaperUpdateError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def commands(monkeypatch):
    """Attach the subcommands to a fresh command table, restored after each test."""

    monkeypatch.setattr(cli, "commands", {})
    monkeypatch.setattr(console, "quiet", False)
    attach_commands(cli, import_commands())
    return cli.commands


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    directory = tmp_path / "env-config"
    monkeypatch.setenv("RANDWALL_CONFIG_DIR", str(directory))
    return directory


def saved_history(state) -> ImageHistory:
    return HistoryStore(state.directory / "history.json").load()


def test_all_subcommands_are_attached(commands):
    assert set(commands) == {"config", "explore", "less", "more", "next"}


def test_next_applies_and_saves(runner, state, desktop):
    result = runner.invoke(cli, ["next"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert "Applied next wallpaper" in result.output
    assert len(desktop.applied) == 1
    assert desktop.current in saved_history(state)
    assert (state.directory / "config.json").is_file()


def test_next_with_path_option(runner, state, desktop, image_dir):
    result = runner.invoke(cli, ["next", "-p", str(image_dir / "city.jpeg")], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert desktop.applied == [str(image_dir / "city.jpeg")]
    assert load_config(state.directory).paths == [str(image_dir)]


@pytest.mark.parametrize(
    "alias, name",
    [("n", "next"), ("l", "less"), ("m", "more"), ("c", "config"), ("e", "explore")],
)
def test_short_aliases_resolve_to_commands(alias, name, commands):
    ctx = click.Context(cli)

    assert cli.get_command(ctx, alias) is commands[name]


def test_next_by_alias_with_paths_option(runner, state, desktop, image_dir):
    result = runner.invoke(cli, ["n", "--paths", str(image_dir / "beach.png")], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert desktop.applied == [str(image_dir / "beach.png")]


def test_config_by_alias_with_paths_option(runner, state, image_dir):
    result = runner.invoke(
        cli, ["c", "--paths", str(image_dir), "--paths", "/srv/*.png"], obj=state
    )

    assert result.exit_code == ExitCode.SUCCESS
    assert load_config(state.directory).paths == [str(image_dir), "/srv/*.png"]


@pytest.mark.parametrize(
    "args",
    [
        ["next", "--skip-recent", "120"],
        ["next", "--old-bias", "-1"],
        ["next", "--frequently"],
        ["config", "--backend", "windows"],
    ],
)
def test_invalid_arguments_are_rejected(runner, state, desktop, args):
    result = runner.invoke(cli, args, obj=state)

    assert result.exit_code == 2
    assert desktop.applied == []
    assert not (state.directory / "history.json").exists()


def test_config_shows_and_saves_settings(runner, state, image_dir):
    result = runner.invoke(
        cli,
        ["config", "-s", "25", "-b", "0.5", "-m", "30", "-p", str(image_dir), "-p", "/srv/*.png"],
        obj=state,
    )

    assert result.exit_code == ExitCode.SUCCESS
    assert "Skip recent: 25%" in result.output
    assert "/srv/*.png" in result.output
    saved = load_config(state.directory)
    assert saved.skip_recent == 25
    assert saved.old_bias == 0.5
    assert saved.min_time == 30
    assert saved.paths == [str(image_dir), "/srv/*.png"]


def test_config_without_options_changes_nothing(runner, state, image_dir):
    result = runner.invoke(cli, ["config"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert "Old bias: 1.5" in result.output
    assert load_config(state.directory) == state.config


def test_config_backend_resets_desktop(runner, state):
    result = runner.invoke(cli, ["config", "--backend", "feh"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert state.wallpaper is None
    assert load_config(state.directory).backend == "feh"


def test_more_saves_bias(runner, state, desktop, image_dir):
    desktop.current = str(image_dir / "alps.jpg")

    result = runner.invoke(cli, ["more"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert saved_history(state).get(desktop.current).bias == pytest.approx(0.2)


def test_less_saves_bias_and_moves_on(runner, state, desktop, image_dir):
    alps = str(image_dir / "alps.jpg")
    state.history.add(ImageRecord(path=alps, bias=0.36))
    desktop.current = alps

    result = runner.invoke(cli, ["less"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert len(desktop.applied) == 1
    assert saved_history(state).get(alps).bias == pytest.approx(0.2)


def test_less_on_neutral_image_saves_default(runner, state, desktop, image_dir):
    alps = str(image_dir / "alps.jpg")
    desktop.current = alps

    result = runner.invoke(cli, ["less"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert saved_history(state).get(alps).bias == 0.0


def test_more_without_current_wallpaper(runner, state):
    result = runner.invoke(cli, ["more"], obj=state)

    assert result.exit_code == ExitCode.USER_ERROR
    assert "no current wallpaper" in result.output


def test_next_without_paths(runner, state):
    state.config.paths = []

    result = runner.invoke(cli, ["next"], obj=state)

    assert result.exit_code == ExitCode.USER_ERROR
    assert "randwall config --path" in result.output


def test_no_images_still_saves(runner, state, desktop, tmp_path, image_dir):
    (tmp_path / "empty").mkdir()
    state.config.paths = [str(tmp_path / "empty")]
    desktop.current = str(image_dir / "alps.jpg")

    result = runner.invoke(cli, ["next"], obj=state)

    assert result.exit_code == ExitCode.NO_IMAGES
    assert "no images" in result.output
    assert saved_history(state).get(desktop.current).removed is not None


def test_failed_apply_crashes_without_saving(runner, state, desktop):
    desktop.apply = Mock(side_effect=WallpaperUpdateError("desktop refused"))

    result = runner.invoke(cli, ["next"], obj=state)

    assert result.exit_code == ExitCode.CRASH
    assert "desktop refused" in result.output
    assert not (state.directory / "history.json").exists()


def test_failed_save_crashes(runner, state, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    state.directory = blocker

    result = runner.invoke(cli, ["next"], obj=state)

    assert result.exit_code == ExitCode.CRASH
    assert "could not save settings" in result.output


def test_seed_makes_selection_reproducible(runner, state, desktop):
    runner.invoke(cli, ["--seed", "7", "next"], obj=state)
    first = desktop.current

    state.history = ImageHistory()
    desktop.current = None
    runner.invoke(cli, ["--seed", "7", "next"], obj=state)

    assert desktop.applied == [first, first]


def test_quiet_silences_messages(runner, state, desktop):
    result = runner.invoke(cli, ["--quiet", "next"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert len(desktop.applied) == 1
    assert "Applied" not in result.output


def test_quiet_still_shows_errors(runner, state):
    result = runner.invoke(cli, ["--quiet", "more"], obj=state)

    assert result.exit_code == ExitCode.USER_ERROR
    assert "no current wallpaper" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_state_is_loaded_from_config_dir(runner, config_env, image_dir):
    result = runner.invoke(cli, ["config", "--path", str(image_dir)])

    assert result.exit_code == ExitCode.SUCCESS
    assert json.loads((config_env / "config.json").read_text())["paths"] == [str(image_dir)]
    assert (config_env / "history.json").is_file()


def test_corrupt_history_fails_before_running(runner, config_env):
    config_env.mkdir()
    (config_env / "history.json").write_text("{broken")

    result = runner.invoke(cli, ["config", "--min-time", "5"])

    assert result.exit_code == ExitCode.CRASH
    assert "Could not load the history" in result.output
    assert not (config_env / "config.json").exists()


def test_explore_opens_existing_folders(runner, state, image_dir, tmp_path, monkeypatch):
    launch = Mock()
    monkeypatch.setattr(click, "launch", launch)
    state.config.paths = [str(image_dir), str(tmp_path / "missing")]

    result = runner.invoke(cli, ["explore"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    launch.assert_called_once_with(str(image_dir))
    assert "Opened folder" in result.output
    assert "Skipped folder" in result.output


def test_explore_without_paths(runner, state, monkeypatch):
    launch = Mock()
    monkeypatch.setattr(click, "launch", launch)
    state.config.paths = []

    result = runner.invoke(cli, ["explore"], obj=state)

    assert result.exit_code == ExitCode.USER_ERROR
    launch.assert_not_called()


@pytest.mark.parametrize(
    "argv",
    [
        ["randwall", "--bogus"],
        ["randwall", "next", "--skip-recent", "120"],
        ["randwall", "sparkle"],
    ],
)
def test_main_invalid_arguments_exit_status(monkeypatch, config_env, argv):
    monkeypatch.setattr(sys, "argv", argv)

    with pytest.raises(SystemExit) as exit_info:
        main()

    assert exit_info.value.code == ExitCode.INVALID_ARGUMENTS


def test_main_success_exit_status(monkeypatch, config_env):
    monkeypatch.setattr(sys, "argv", ["randwall", "config", "--min-time", "15"])

    with pytest.raises(SystemExit) as exit_info:
        main()

    assert exit_info.value.code == ExitCode.SUCCESS
    assert load_config(config_env).min_time == 15


def test_verbose_logs_selection(runner, state):
    result = runner.invoke(cli, ["--verbose", "next"], obj=state)

    assert result.exit_code == ExitCode.SUCCESS
    assert "Selected" in result.output
