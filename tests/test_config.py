from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from packaging.version import Version

from distsift.config import (
    DistSiftConfig,
    _parse_section,
    _pyproject_has_distsift_section,
    _read_toml,
    discover_config_file,
    load_config,
)
from distsift.core.policy import HashMode
from distsift.exceptions import ConfigError


@pytest.mark.unit
class TestDistSiftConfig:
    """Tests for DistSiftConfig dataclass."""

    def test_default_initialization(self) -> None:
        """Defaults allow everything and verify nothing."""
        config = DistSiftConfig()

        assert config.no_binary == []
        assert config.no_build == []
        assert config.require_hashes is False
        assert config.hashes == {}
        assert config.match_platform_tags is True
        assert config.source_path is None

    def test_build_options(self) -> None:
        config = DistSiftConfig(no_binary=[":all:"], no_build=["pyyaml"])

        options = config.build_options()

        assert options.no_binary_package("idna")
        assert options.no_build_package("PyYAML")
        assert not options.no_build_package("idna")

    def test_hash_strategy(self) -> None:
        config = DistSiftConfig(hashes={"idna==3.6": ["sha256:abc"]})

        strategy = config.hash_strategy()

        assert strategy.mode is HashMode.VERIFY
        assert strategy.get_package("idna", Version("3.6")).requires_validation()

    def test_require_hashes(self) -> None:
        assert DistSiftConfig(require_hashes=True).hash_strategy().mode is HashMode.REQUIRE

    def test_invalid_hashes_raise_config_error(self) -> None:
        config = DistSiftConfig(
            hashes={"idna": ["sha256:abc"]},
            source_path=Path("/test/distsift.toml"),
        )

        with pytest.raises(ConfigError) as exc_info:
            config.hash_strategy()

        assert exc_info.value.option == "hashes"
        assert exc_info.value.config_path == str(Path("/test/distsift.toml"))

    def test_with_cli_options_layers_on_file_values(self) -> None:
        config = DistSiftConfig(
            no_binary=["pyyaml"],
            hashes={"idna==3.6": ["sha256:abc"]},
            source_path=Path("/test/distsift.toml"),
        )

        merged = config.with_cli_options(
            no_binary=[":none:"], no_build=["idna"], require_hashes=True
        )

        assert merged.no_binary == ["pyyaml", ":none:"]
        assert merged.no_build == ["idna"]
        assert merged.require_hashes is True
        assert merged.hashes == config.hashes
        assert merged.source_path == config.source_path
        assert config.no_binary == ["pyyaml"]
        assert not merged.build_options().no_binary_package("pyyaml")
        assert merged.hash_strategy().mode is HashMode.REQUIRE

    def test_to_log_dict(self) -> None:
        """to_log_dict omits metadata and summarizes hashes."""
        config = DistSiftConfig(
            hashes={"idna==3.6": ["sha256:abc"]},
            source_path=Path("/test/path.toml"),
        )

        result = config.to_log_dict()

        assert result["hashes"] == 1
        assert "source_path" not in result


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file function."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[distsift]\n", encoding="utf-8")
        (tmp_path / "distsift.toml").write_text("[distsift]\n", encoding="utf-8")

        with patch("distsift.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            discover_config_file(tmp_path / "nonexistent.toml")

        assert "not found" in str(exc_info.value).lower()

    def test_discovers_distsift_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "distsift.toml"
        config_file.write_text("[distsift]\n", encoding="utf-8")

        with patch("distsift.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == config_file

    def test_discovers_pyproject_toml_with_section(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text("[tool.distsift]\nrequire_hashes = true\n", encoding="utf-8")

        with patch("distsift.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() == config_file

    def test_ignores_pyproject_toml_without_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.other]\nkey = 'v'\n", encoding="utf-8")

        with patch("distsift.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None

    def test_ignores_invalid_pyproject_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.distsift\n", encoding="utf-8")

        assert _pyproject_has_distsift_section(path) is False


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config and the section parser."""

    def test_no_file_uses_defaults(self, tmp_path: Path) -> None:
        with patch("distsift.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config == DistSiftConfig()

    def test_loads_distsift_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "distsift.toml"
        config_file.write_text(
            "\n".join(
                [
                    "[distsift]",
                    'no_binary = ":all:"',
                    'no_build = ["pyyaml"]',
                    "require_hashes = true",
                    "match_platform_tags = false",
                    "",
                    "[distsift.hashes]",
                    '"idna==3.6" = ["sha256:abc"]',
                ]
            ),
            encoding="utf-8",
        )

        config = load_config(config_file)

        assert config.no_binary == [":all:"]
        assert config.no_build == ["pyyaml"]
        assert config.require_hashes is True
        assert config.match_platform_tags is False
        assert config.hashes == {"idna==3.6": ["sha256:abc"]}
        assert config.source_path == config_file.resolve()

    def test_loads_tool_section_from_pyproject(self, tmp_path: Path) -> None:
        config_file = tmp_path / "pyproject.toml"
        config_file.write_text(
            '[project]\nname = "x"\n\n[tool.distsift]\nno_build = ["six"]\n',
            encoding="utf-8",
        )

        config = load_config(config_file)

        assert config.no_build == ["six"]

    def test_empty_section_uses_defaults_with_source(self, tmp_path: Path) -> None:
        config_file = tmp_path / "distsift.toml"
        config_file.write_text("# nothing here\n", encoding="utf-8")

        config = load_config(config_file)

        assert config.no_binary == []
        assert config.source_path == config_file.resolve()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "distsift.toml"
        config_file.write_text("[distsift\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            _read_toml(config_file)

        assert "Invalid TOML" in str(exc_info.value)

    def test_unknown_keys(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({"no_binary": [], "colour": True}, config_path="x.toml")

        assert "colour" in str(exc_info.value)

    @pytest.mark.parametrize(
        "section, option",
        [
            ({"no_binary": "pyyaml"}, "no_binary"),
            ({"no_build": [1, 2]}, "no_build"),
            ({"require_hashes": "yes"}, "require_hashes"),
            ({"match_platform_tags": 1}, "match_platform_tags"),
            ({"hashes": {"idna==3.6": "sha256:abc"}}, "hashes"),
            ({"hashes": ["idna==3.6"]}, "hashes"),
        ],
    )
    def test_invalid_types(self, section: dict, option: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            _parse_section(section, config_path="x.toml")

        assert exc_info.value.option == option
