"""Unit tests for the CLI entry point."""

from unittest.mock import AsyncMock

from headhunter import cli
from headhunter.shared.exceptions import ConfigurationError


def quiet(mocker):
    mocker.patch("headhunter.cli.logger")
    mocker.patch("headhunter.cli.load_dotenv")


def test_configuration_error_exits_with_1(mocker):
    quiet(mocker)
    mocker.patch(
        "headhunter.cli.Config.from_env",
        side_effect=ConfigurationError("CLAN_TAG must be set"),
    )
    headhunter_cls = mocker.patch("headhunter.cli.Headhunter")

    assert cli.main() == 1
    headhunter_cls.assert_not_called()


def test_dispatches_argv_and_closes(mocker, monkeypatch):
    quiet(mocker)
    mocker.patch("headhunter.cli.Config.from_env")
    headhunter_cls = mocker.patch("headhunter.cli.Headhunter")
    dispatcher_cls = mocker.patch("headhunter.cli.CommandDispatcher")
    dispatcher_cls.return_value.dispatch = AsyncMock(return_value=0)
    monkeypatch.setattr("sys.argv", ["headhunter", "show"])

    assert cli.main() == 0
    dispatcher_cls.return_value.dispatch.assert_awaited_once_with(
        ["headhunter", "show"]
    )
    headhunter_cls.return_value.close.assert_called_once()


def test_unhandled_error_exits_with_1(mocker):
    quiet(mocker)
    mocker.patch("headhunter.cli.Config.from_env")
    headhunter_cls = mocker.patch("headhunter.cli.Headhunter")
    dispatcher_cls = mocker.patch("headhunter.cli.CommandDispatcher")
    dispatcher_cls.return_value.dispatch = AsyncMock(side_effect=RuntimeError("x"))

    assert cli.main() == 1
    headhunter_cls.return_value.close.assert_called_once()
