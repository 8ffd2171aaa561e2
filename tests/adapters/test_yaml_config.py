import pytest

from depchain.adapters.config.yaml_config import CONFIG_NAME, load_config
from depchain.adapters.errors import ConfigParseError
from depchain.domain.config import CheckConfig
from depchain.domain.ignores import IGNORED_IMPORTS
from depchain.domain.package import PackageArea


def test_defaults_without_config_file(tmp_path):
    assert load_config(tmp_path) == CheckConfig()


def test_config_extends_ignore_lists(tmp_path):
    (tmp_path / CONFIG_NAME).write_text(
        "packages: ['apps/*']\n"
        "ignored_imports: ['hoisted-helper']\n"
        "ignored_packages: ['@acme/legacy']\n"
        "areas: ['package', 'plugin']\n"
    )
    config = load_config(tmp_path)
    assert config.ignored_imports == (*IGNORED_IMPORTS, "hoisted-helper")
    assert config.is_package_ignored("@acme/legacy")
    assert config.is_package_ignored("expo")
    assert config.package_globs == ("apps/*",)
    assert config.areas == (PackageArea.PACKAGE, PackageArea.PLUGIN)


def test_unknown_key_is_rejected(tmp_path):
    (tmp_path / CONFIG_NAME).write_text("ignore: ['x']\n")
    with pytest.raises(ConfigParseError):
        load_config(tmp_path)


def test_unknown_area_is_rejected(tmp_path):
    (tmp_path / CONFIG_NAME).write_text("areas: ['scripts']\n")
    with pytest.raises(ConfigParseError):
        load_config(tmp_path)


def test_invalid_yaml_is_rejected(tmp_path):
    (tmp_path / CONFIG_NAME).write_text("packages: [unclosed\n")
    with pytest.raises(ConfigParseError):
        load_config(tmp_path)
