from pathlib import Path

import pytest

from oasgen.config import GeneratorConfig, load_config
from oasgen.errors import OasgenError


class TestGeneratorConfig:
    def test_defaults(self):
        config = GeneratorConfig()
        assert config.strict is True
        assert config.filter_tag == ""
        assert config.schema_without_pkg is False

    def test_merged_ignores_none(self):
        config = GeneratorConfig(filter_tag="pets").merged(filter_tag=None, title="Store")
        assert config.filter_tag == "pets"
        assert config.title == "Store"


class TestLoadConfig:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "oasgen.yaml"
        path.write_text("source_root: ./src\nfilter_tag: public\nstrict: false\n", encoding="utf-8")

        config = load_config(path)

        assert config.source_root == Path("./src")
        assert config.filter_tag == "public"
        assert config.strict is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "oasgen.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == GeneratorConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "oasgen.yaml"
        path.write_text("key: [invalid\n", encoding="utf-8")
        with pytest.raises(OasgenError):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "oasgen.yaml"
        path.write_text("strict: maybe\n", encoding="utf-8")
        with pytest.raises(OasgenError):
            load_config(path)
