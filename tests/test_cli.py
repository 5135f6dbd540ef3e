import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from oasgen.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliGenerate:
    def test_generate_json(self, tmp_path):
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(FIXTURES / "petstore"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        doc = json.loads(output.read_text(encoding="utf-8"))
        assert doc["openapi"] == "3.0.0"
        assert "/pets/{id}" in doc["paths"]
        assert "models.Pet" in doc["components"]["schemas"]
        assert "Found 3 paths" in result.output

    def test_generate_yaml_with_tag(self, tmp_path):
        output = tmp_path / "out" / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "petstore"),
            "-o", str(output),
            "--yaml",
            "--tag", "owners",
            "--title", "Petstore",
        ])

        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert list(doc["paths"]) == ["/owners"]
        assert doc["info"]["title"] == "Petstore"

    def test_config_file(self, tmp_path):
        config = tmp_path / "oasgen.yaml"
        config.write_text("filter_tag: admin\nschema_without_pkg: true\n", encoding="utf-8")
        output = tmp_path / "openapi.json"

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "petstore"), "-o", str(output), "--config", str(config),
        ])

        assert result.exit_code == 0, result.output
        doc = json.loads(output.read_text(encoding="utf-8"))
        assert list(doc["paths"]) == ["/pets/{id}"]
        # operations filtered out before pass 2 never resolve their types
        assert doc["components"]["schemas"] == {}

    def test_declaration_error_fails(self, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/bad\n", encoding="utf-8")
        (tmp_path / "main.go").write_text(
            'package main\n\n// @Success 999 object User "bad"\n// @Router /x [get]\nfunc X() {}\n',
            encoding="utf-8",
        )
        output = tmp_path / "openapi.json"

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(tmp_path), "-o", str(output)])

        assert result.exit_code != 0
        assert "Invalid http status code 999" in result.output
        assert not output.exists()

    def test_lenient_reports_skipped(self, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/bad\n", encoding="utf-8")
        (tmp_path / "main.go").write_text(
            'package main\n\n// @Success 999 object User "bad"\n// @Router /x [get]\nfunc X() {}\n',
            encoding="utf-8",
        )
        output = tmp_path / "openapi.json"

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(tmp_path), "-o", str(output), "--lenient"])

        assert result.exit_code == 0, result.output
        assert "Skipped main.X" in result.output
        assert json.loads(output.read_text(encoding="utf-8"))["paths"] == {}
