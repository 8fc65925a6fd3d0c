"""Tests for the TOTP generator."""

import stat
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ssh_totp.errors import ExternalToolError
from ssh_totp.services.totp import TOTPGenerator, extract_code


@pytest.fixture
def credentials() -> MagicMock:
    """Credential provider returning a fixed password."""
    provider = MagicMock()
    provider.get_or_prompt.return_value = "store-pass"
    return provider


def _script(tmp_path: Path, body: str) -> str:
    path = tmp_path / "fake-totp"
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return str(path)


class TestExtractCode:
    """Test output parsing."""

    def test_last_line_wins(self) -> None:
        assert extract_code("junk line\n123456\n") == "123456"

    def test_empty_output(self) -> None:
        """Empty output is returned as an empty code, not an error."""
        assert extract_code("") == ""

    def test_surrounding_whitespace(self) -> None:
        assert extract_code("\n\n  654321  \n\n") == "654321"

    def test_single_line(self) -> None:
        assert extract_code("000111") == "000111"


class TestGenerate:
    """Test running the generator command."""

    @pytest.mark.asyncio
    async def test_passes_arguments_and_password(
        self, tmp_path: Path, credentials: MagicMock
    ) -> None:
        """Namespace and identity are arguments, password goes to stdin."""
        command = _script(
            tmp_path,
            'read pass\necho "Password: "\necho "$1 $2 $3 $pass"\n',
        )
        generator = TOTPGenerator(credentials, command=command)

        code = await generator.generate("prod", "alice@db1")

        assert code == "generate prod alice@db1 store-pass"
        credentials.get_or_prompt.assert_called_once()

    @pytest.mark.asyncio
    async def test_empty_output_is_empty_code(
        self, tmp_path: Path, credentials: MagicMock
    ) -> None:
        command = _script(tmp_path, "exit 0\n")
        generator = TOTPGenerator(credentials, command=command)

        assert await generator.generate("prod", "db1") == ""

    @pytest.mark.asyncio
    async def test_stderr_reaches_terminal(
        self, tmp_path: Path, credentials: MagicMock, capfd: pytest.CaptureFixture[str]
    ) -> None:
        """Generator diagnostics go to our stderr and stay out of the code."""
        command = _script(
            tmp_path,
            "echo 'Enter password:' >&2\necho 123456\necho 'code expires in 12s' >&2\n",
        )
        generator = TOTPGenerator(credentials, command=command)

        code = await generator.generate("prod", "db1")

        assert code == "123456"
        err = capfd.readouterr().err
        assert "Enter password:" in err
        assert "code expires in 12s" in err

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(
        self, tmp_path: Path, credentials: MagicMock
    ) -> None:
        """A failing generator raises ExternalToolError with its status."""
        command = _script(tmp_path, "echo 'bad password' >&2\nexit 3\n")
        generator = TOTPGenerator(credentials, command=command)

        with pytest.raises(ExternalToolError) as exc_info:
            await generator.generate("prod", "db1")

        assert exc_info.value.returncode == 3
        assert exc_info.value.command == command

    @pytest.mark.asyncio
    async def test_missing_command_raises(
        self, tmp_path: Path, credentials: MagicMock
    ) -> None:
        """A command that cannot start raises ExternalToolError."""
        generator = TOTPGenerator(credentials, command=str(tmp_path / "missing"))

        with pytest.raises(ExternalToolError) as exc_info:
            await generator.generate("prod", "db1")

        assert exc_info.value.returncode is None
        assert isinstance(exc_info.value.original_error, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_uses_mocked_subprocess(self, credentials: MagicMock) -> None:
        """Output of the subprocess is parsed with extract_code."""
        process = MagicMock()
        process.communicate = AsyncMock(return_value=(b"junk line\n123456\n", None))
        process.returncode = 0

        with patch(
            "ssh_totp.services.totp.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ) as mock_exec:
            generator = TOTPGenerator(credentials)
            code = await generator.generate("prod", "db1")

        assert code == "123456"
        assert mock_exec.call_args.args == ("totp-cli", "generate", "prod", "db1")
        assert mock_exec.call_args.kwargs["stderr"] is None
        process.communicate.assert_awaited_once_with(b"store-pass")
