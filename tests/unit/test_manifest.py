"""Tests for reckon.toml loading and result formatting."""

import math
from pathlib import Path

import pytest

from reckon.core.manifest import ConfigError, ReckonConfig, format_value, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(tmp_path / "missing.toml")
        assert cfg == ReckonConfig()
        assert cfg.output.precision is None
        assert cfg.diagnostics.style == "full"
        assert cfg.logging.level == "WARNING"
        assert cfg.repl.prompt == ">>> "

    def test_load(self, config_file: Path) -> None:
        config_file.write_text(
            """
[output]
precision = 6

[diagnostics]
style = "compact"

[logging]
level = "debug"

[repl]
prompt = "= "
"""
        )
        cfg = load_config(config_file)
        assert cfg.output.precision == 6
        assert cfg.diagnostics.style == "compact"
        assert cfg.logging.level == "DEBUG"
        assert cfg.repl.prompt == "= "
        assert cfg.path == config_file

    def test_partial_file(self, config_file: Path) -> None:
        config_file.write_text('[repl]\nprompt = "> "\n')
        cfg = load_config(config_file)
        assert cfg.repl.prompt == "> "
        assert cfg.diagnostics.style == "full"

    def test_default_path_is_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "reckon.toml").write_text("[output]\nprecision = 3\n")
        monkeypatch.chdir(tmp_path)
        assert load_config().output.precision == 3

    @pytest.mark.parametrize(
        "content",
        [
            "[output]\nprecision = 0\n",
            '[output]\nprecision = "high"\n',
            '[diagnostics]\nstyle = "fancy"\n',
            "not toml = = =\n",
        ],
    )
    def test_invalid(self, config_file: Path, content: str) -> None:
        config_file.write_text(content)
        with pytest.raises(ConfigError):
            load_config(config_file)


class TestFormatValue:
    def test_integral(self) -> None:
        assert format_value(5.0) == "5"
        assert format_value(-0.0) == "0"
        assert format_value(1e20) == "1e+20"

    def test_fraction(self) -> None:
        assert format_value(0.125) == "0.125"
        assert format_value(0.1 + 0.2) == "0.30000000000000004"

    def test_precision(self) -> None:
        assert format_value(0.1 + 0.2, 6) == "0.3"
        assert format_value(math.pi, 3) == "3.14"
        assert format_value(2.0, 3) == "2"

    def test_non_finite(self) -> None:
        assert format_value(math.inf) == "inf"
        assert format_value(math.nan) == "nan"
