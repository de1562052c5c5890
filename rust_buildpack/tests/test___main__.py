import sys
from unittest.mock import MagicMock, patch

from rust_buildpack import __main__


class TestCmdFunctions:
    @patch("rust_buildpack.detect.main")
    def test_cmd_detect_success(self, mock_main):
        result = __main__.cmd_detect(["/tmp/build"])
        assert result == 0
        mock_main.assert_called_once_with(["/tmp/build"])

    @patch("rust_buildpack.detect.main")
    def test_cmd_detect_failure(self, mock_main):
        mock_main.side_effect = SystemExit(1)
        assert __main__.cmd_detect([]) == 1

    @patch("rust_buildpack.compile.main")
    def test_cmd_compile_success(self, mock_main):
        mock_main.side_effect = SystemExit(0)
        assert __main__.cmd_compile(["b", "c", "e"]) == 0
        mock_main.assert_called_once_with(["b", "c", "e"])

    @patch("rust_buildpack.compile.main")
    def test_cmd_compile_propagates_status(self, mock_main):
        mock_main.side_effect = SystemExit(101)
        assert __main__.cmd_compile(["b", "c", "e"]) == 101

    @patch("rust_buildpack.compile.main")
    def test_cmd_compile_non_int_exit(self, mock_main):
        mock_main.side_effect = SystemExit("error")
        assert __main__.cmd_compile([]) == 1

    @patch("rust_buildpack.release.main")
    def test_cmd_release_success(self, mock_main):
        assert __main__.cmd_release(["/tmp/build"]) == 0
        mock_main.assert_called_once_with(["/tmp/build"])


class TestMain:
    def test_main_help(self, capsys):
        with patch.object(sys, "argv", ["rust_buildpack", "--help"]):
            result = __main__.main()
        assert result == 0
        out = capsys.readouterr().out
        assert "Available commands:" in out
        assert "compile" in out

    def test_main_no_args(self):
        with patch.object(sys, "argv", ["rust_buildpack"]):
            assert __main__.main() == 0

    def test_main_unknown_command(self, capsys):
        with patch.object(sys, "argv", ["rust_buildpack", "deploy"]):
            result = __main__.main()
        assert result == 1
        assert "Unknown command: deploy" in capsys.readouterr().out

    def test_main_provision_alias(self):
        mock_cmd = MagicMock(return_value=0)
        with patch.dict(__main__.COMMANDS, {"provision": (mock_cmd, "alias")}):
            with patch.object(sys, "argv", ["rust_buildpack", "provision", "b", "c", "e"]):
                assert __main__.main() == 0
        mock_cmd.assert_called_once_with(["b", "c", "e"])

    def test_provision_is_compile(self):
        assert __main__.COMMANDS["provision"][0] is __main__.cmd_compile
