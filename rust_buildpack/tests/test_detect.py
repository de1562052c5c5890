import pytest

from rust_buildpack.detect import is_rust_app, main


class TestIsRustApp:
    def test_with_manifest(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text("[package]\n")
        assert is_rust_app(tmp_path) is True

    def test_without_manifest(self, tmp_path):
        assert is_rust_app(tmp_path) is False

    def test_manifest_is_directory(self, tmp_path):
        (tmp_path / "Cargo.toml").mkdir()
        assert is_rust_app(tmp_path) is False


class TestMain:
    def test_detected(self, tmp_path, capsys):
        (tmp_path / "Cargo.toml").write_text("[package]\n")

        main([str(tmp_path)])

        assert capsys.readouterr().out.strip() == "Rust"

    def test_not_detected(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path)])

        assert excinfo.value.code == 1
        assert capsys.readouterr().out == ""
