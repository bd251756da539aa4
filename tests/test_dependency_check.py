"""Tests for dependency detection (infra/dependency_check.py)."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from iam_policy_dl.exceptions import AwsCliNotFoundError, JsonToolMissingError
from iam_policy_dl.infra.dependency_check import (
    AWS_CLI_INSTALL_URL,
    _platform_install_commands,
    detect_aws_cli,
    detect_jmespath,
    require_aws_cli,
    require_jmespath,
)

_WHICH = "iam_policy_dl.infra.dependency_check.shutil.which"
_SYSTEM = "iam_policy_dl.infra.dependency_check.platform.system"


class TestDetectAwsCli:
    @patch(_WHICH, return_value="/usr/local/bin/aws")
    def test_found(self, mock_which: object) -> None:
        status = detect_aws_cli()
        assert status.found
        assert status.location is not None
        assert status.install_commands == ()

    @patch(_WHICH, return_value=None)
    def test_missing(self, _mock_which: object) -> None:
        status = detect_aws_cli()
        assert not status.found
        assert status.location is None
        assert status.install_commands

    @patch(_WHICH, return_value=None)
    def test_uses_configured_command(self, mock_which) -> None:  # type: ignore[no-untyped-def]
        detect_aws_cli("/opt/aws/bin/aws")
        mock_which.assert_called_once_with("/opt/aws/bin/aws")


class TestRequireAwsCli:
    @patch(_WHICH, return_value="/usr/local/bin/aws")
    def test_returns_path(self, _mock_which: object) -> None:
        assert isinstance(require_aws_cli(), Path)

    @patch(_WHICH, return_value=None)
    def test_missing_raises_with_url(self, _mock_which: object) -> None:
        with pytest.raises(AwsCliNotFoundError) as exc_info:
            require_aws_cli()
        assert exc_info.value.exit_code == 1
        assert AWS_CLI_INSTALL_URL in (exc_info.value.hint or "")

    @patch(_WHICH, return_value=None)
    def test_custom_command_mentioned(self, _mock_which: object) -> None:
        with pytest.raises(AwsCliNotFoundError) as exc_info:
            require_aws_cli("aws2")
        assert "AWS_CMD" in (exc_info.value.hint or "")


class TestPlatformInstallCommands:
    @pytest.mark.parametrize(
        ("system", "needle"),
        [
            ("Windows", "winget"),
            ("Linux", "awscli-exe-linux"),
            ("Darwin", "brew install awscli"),
            ("Plan9", AWS_CLI_INSTALL_URL),
        ],
    )
    def test_per_platform(self, system: str, needle: str) -> None:
        with patch(_SYSTEM, return_value=system):
            commands = _platform_install_commands()
        assert any(needle in command for command in commands)


class TestJmespath:
    def test_detect_found(self) -> None:
        status = detect_jmespath()
        assert status.found
        assert status.location

    def test_detect_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "jmespath", None)
        status = detect_jmespath()
        assert not status.found
        assert status.install_commands == ("pip install jmespath",)

    def test_require_missing_exit_code(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "jmespath", None)
        with pytest.raises(JsonToolMissingError) as exc_info:
            require_jmespath()
        assert exc_info.value.exit_code == 3
