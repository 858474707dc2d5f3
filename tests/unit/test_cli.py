"""Tests for the pandaconf CLI commands"""

import json

import pytest
import yaml
from click.testing import CliRunner

from pandaconf.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path, sample_yaml):
    path = tmp_path / "redpanda.yaml"
    path.write_text(sample_yaml)
    return str(path)


@pytest.fixture
def tls_config(tmp_path, tls_material):
    """A config whose rpk.kafka_api.tls points at real files under tmp_path."""
    (tmp_path / "ca.crt").write_bytes(tls_material["ca"])
    (tmp_path / "node.crt").write_bytes(tls_material["cert"])
    (tmp_path / "node.key").write_bytes(tls_material["key"])

    def _write(tls: dict) -> str:
        path = tmp_path / "tls.yaml"
        path.write_text(yaml.safe_dump({"rpk": {"kafka_api": {"tls": tls}}}))
        return str(path)

    return _write


class TestShow:
    def test_effective(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "show"])
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.output)
        assert data["config_file"] == config_path
        assert data["redpanda"]["node_id"] == 1
        assert data["redpanda"]["rpc_server"] == {"address": "0.0.0.0", "port": 33145}
        assert data["extra_feature_flag"] is True

    def test_pristine(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "--set", "redpanda.node_id=9", "show", "--pristine"])
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.output)
        assert data["redpanda"]["node_id"] == 1
        assert data["config_file"] == ""
        assert "pandaproxy" not in data
        assert data["redpanda"]["tiered_storage"]["options"] == ["b", "a", "c"]

    def test_json_format(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "show", "--format", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["node_uuid"] == "5f1e3c1a"

    def test_pristine_without_file(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr("pandaconf.config.loader.SEARCH_PATHS", (str(tmp_path / "absent.yaml"),))
        result = runner.invoke(cli, ["show", "--pristine"])
        assert result.exit_code == 1
        assert "No configuration file was loaded" in result.output

    def test_defaults_without_file(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr("pandaconf.config.loader.SEARCH_PATHS", (str(tmp_path / "absent.yaml"),))
        result = runner.invoke(cli, ["show"])
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(result.output)["redpanda"]["kafka_api"][0]["port"] == 9092


class TestGet:
    def test_scalar(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "get", "redpanda.kafka_api.1.port"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "19092"

    def test_bool(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "get", "rpk.tune_network"])
        assert result.output.strip() == "true"

    def test_mapping(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "get", "redpanda.tiered_storage"])
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(result.output) == {"bucket": "archive", "options": ["b", "a", "c"]}

    def test_override(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "--set", "redpanda.node_id=5", "get", "redpanda.node_id"])
        assert result.output.strip() == "5"

    def test_pristine_ignores_override(self, runner, config_path):
        result = runner.invoke(
            cli, ["--config", config_path, "--set", "redpanda.node_id=5", "get", "--pristine", "redpanda.node_id"]
        )
        assert result.output.strip() == "1"

    def test_missing_key(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "get", "redpanda.nope"])
        assert result.exit_code == 1
        assert "Key not found: redpanda.nope" in result.output


class TestPidFile:
    def test_pid_file(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "pid-file"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "/var/lib/node/pid.lock"

    def test_relative_data_directory(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "--set", "redpanda.data_directory=data", "pid-file"])
        assert result.exit_code == 1
        assert "Error 3001" in result.output


class TestTLSCheck:
    def test_not_configured(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "tls-check", "--api", "admin"])
        assert result.exit_code == 0, result.output
        assert "admin API: TLS not configured" in result.output

    def test_mutual_tls(self, runner, tmp_path, tls_config):
        path = tls_config({
            "truststore_file": str(tmp_path / "ca.crt"),
            "cert_file": str(tmp_path / "node.crt"),
            "key_file": str(tmp_path / "node.key"),
        })
        result = runner.invoke(cli, ["--config", path, "tls-check"])
        assert result.exit_code == 0, result.output
        assert "kafka API: TLS ok" in result.output
        assert f"trust roots: {tmp_path / 'ca.crt'}" in result.output
        assert f"client certificate: {tmp_path / 'node.crt'}" in result.output

    def test_system_roots(self, runner, tls_config):
        result = runner.invoke(cli, ["--config", tls_config({}), "tls-check"])
        assert result.exit_code == 0, result.output
        assert "trust roots: system defaults" in result.output
        assert "client certificate: none" in result.output

    def test_incomplete_pair(self, runner, tmp_path, tls_config):
        result = runner.invoke(cli, ["--config", tls_config({"cert_file": str(tmp_path / "node.crt")}), "tls-check"])
        assert result.exit_code == 1
        assert "Error 2001" in result.output

    def test_unreadable_truststore(self, runner, tmp_path, tls_config):
        result = runner.invoke(
            cli, ["--config", tls_config({"truststore_file": str(tmp_path / "missing.crt")}), "tls-check"]
        )
        assert result.exit_code == 1
        assert "Error 2002" in result.output


class TestErrors:
    def test_missing_config(self, runner, tmp_path):
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "show"])
        assert result.exit_code == 1
        assert "Error 1001" in result.output

    def test_unparseable_config(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("redpanda: [unclosed\n")
        result = runner.invoke(cli, ["--config", str(path), "show"])
        assert result.exit_code == 1
        assert "Error 1002" in result.output

    def test_bad_override(self, runner, config_path):
        result = runner.invoke(cli, ["--config", config_path, "--set", "no-equals-sign", "show"])
        assert result.exit_code == 1
        assert "Error 1004" in result.output
