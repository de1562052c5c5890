import pytest

from rust_buildpack.shared.channels import (
    DEFAULT_CHANNEL,
    ToolchainConfig,
    resolve_config,
)
from rust_buildpack.shared.errors import ConfigurationError


class TestResolveConfig:
    def test_default_channel(self, capsys):
        config = resolve_config({})
        assert config.channel == DEFAULT_CHANNEL == "nightly"
        assert config.pin is None
        assert "RUSTC_CHANNEL not set" in capsys.readouterr().err

    def test_blank_channel_uses_default(self):
        assert resolve_config({"RUSTC_CHANNEL": "  "}).channel == "nightly"

    @pytest.mark.parametrize("channel", ["stable", "beta", "nightly"])
    def test_supported_channels(self, channel):
        assert resolve_config({"RUSTC_CHANNEL": channel}).channel == channel

    @pytest.mark.parametrize("channel", ["invalid", "Stable", "1.2.3", "dev"])
    def test_unknown_channel(self, channel):
        with pytest.raises(ConfigurationError) as excinfo:
            resolve_config({"RUSTC_CHANNEL": channel})
        assert excinfo.value.variable == "RUSTC_CHANNEL"
        assert excinfo.value.exit_code == 1

    def test_stable_with_revision(self):
        config = resolve_config({"RUSTC_CHANNEL": "stable", "RUSTC_REVISION": "1.2.3"})
        assert config == ToolchainConfig("stable", revision="1.2.3")
        assert config.pin == "1.2.3"
        assert not config.is_rolling

    def test_stable_ignores_date(self, capsys):
        config = resolve_config({"RUSTC_CHANNEL": "stable", "RUSTC_DATE": "2015-01-01"})
        assert config.date is None
        assert "RUSTC_DATE is ignored" in capsys.readouterr().err

    def test_stable_malformed_revision(self):
        with pytest.raises(ConfigurationError) as excinfo:
            resolve_config({"RUSTC_CHANNEL": "stable", "RUSTC_REVISION": "2015-01-01"})
        assert excinfo.value.variable == "RUSTC_REVISION"

    def test_nightly_with_date(self):
        config = resolve_config({"RUSTC_CHANNEL": "nightly", "RUSTC_DATE": "2015-01-01"})
        assert config == ToolchainConfig("nightly", date="2015-01-01")
        assert config.is_rolling
        assert config.pin == "2015-01-01"

    def test_beta_ignores_revision(self, capsys):
        config = resolve_config({"RUSTC_CHANNEL": "beta", "RUSTC_REVISION": "1.2.3"})
        assert config.revision is None
        assert "RUSTC_REVISION is ignored" in capsys.readouterr().err

    def test_nightly_malformed_date(self):
        with pytest.raises(ConfigurationError) as excinfo:
            resolve_config({"RUSTC_CHANNEL": "nightly", "RUSTC_DATE": "1.2.3"})
        assert excinfo.value.variable == "RUSTC_DATE"


class TestToolchainConfig:
    def test_installer_args_channel_only(self):
        assert ToolchainConfig("nightly").installer_args() == ["--channel=nightly"]

    def test_installer_args_revision(self):
        assert ToolchainConfig("stable", revision="1.3.0").installer_args() == [
            "--channel=stable",
            "--revision=1.3.0",
        ]

    def test_installer_args_date(self):
        assert ToolchainConfig("beta", date="2015-06-01").installer_args() == [
            "--channel=beta",
            "--date=2015-06-01",
        ]

    def test_describe(self):
        assert ToolchainConfig("nightly").describe() == "nightly"
        assert ToolchainConfig("stable", revision="1.2.3").describe() == "stable 1.2.3"
        assert ToolchainConfig("beta", date="2015-06-01").describe() == "beta 2015-06-01"
