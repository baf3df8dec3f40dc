"""Tests for the autorestore commands."""

import json

import httpx
import pytest
from click.testing import CliRunner

from streamadm.admin.client import new_admin_api
from streamadm.cli import cli


@pytest.fixture
def config_path(tmp_path, monkeypatch) -> str:
    """A config file pointing at a single fake node."""
    for var in ("STREAMADM_CONFIG", "STREAMADM_ADMIN_HOSTS", "STREAMADM_USER", "STREAMADM_PASSWORD"):
        monkeypatch.delenv(var, raising=False)

    path = tmp_path / "streamadm.json"
    path.write_text(json.dumps({"admin_hosts": ["node1:9644"]}))
    return str(path)


@pytest.fixture
def run(cluster, config_path):
    """Invoke the CLI against the fake cluster."""
    runner = CliRunner()

    def invoke(*args: str, factory=None, global_args: tuple[str, ...] = ()):
        obj = {"admin_factory": factory or (lambda config: new_admin_api(config, transport=cluster.transport))}
        return runner.invoke(
            cli,
            [*global_args, "--config", config_path, "topic", "autorestore", *args],
            obj=obj,
        )

    return invoke


class TestStartCommand:
    """Test `topic autorestore start`."""

    def test_success(self, run, cluster) -> None:
        """Test a successful start."""
        cluster.reply(200, {"code": 200, "message": "Automated recovery started"})

        result = run("start")

        assert result.exit_code == 0
        assert "Successfully started auto-restore" in result.output

    def test_verbose_message_printed_verbatim(self, run, cluster) -> None:
        """Test that bracketed server text is not treated as markup."""
        cluster.reply(200, {"code": 200, "message": "started [/bold] ok [red]"})

        result = run("start", global_args=("-v",))

        assert result.exit_code == 0
        assert "Cluster response: 200 started [/bold] ok [red]" in result.output.splitlines()
        assert "Successfully started auto-restore" in result.output.splitlines()

    def test_default_pattern(self, run, cluster) -> None:
        """Test that the pattern defaults to all topics."""
        cluster.reply(200, {"code": 200, "message": "ok"})

        run("start")

        assert json.loads(cluster.requests[0].content) == {"topic_names_pattern": ".*"}

    def test_custom_pattern(self, run, cluster) -> None:
        """Test passing --topic-name-pattern."""
        cluster.reply(200, {"code": 200, "message": "ok"})

        result = run("start", "--topic-name-pattern", "orders-.*")

        assert result.exit_code == 0
        assert json.loads(cluster.requests[0].content) == {"topic_names_pattern": "orders-.*"}

    @pytest.mark.parametrize("pattern", ["", "orders-(unclosed"])
    def test_invalid_pattern(self, run, cluster, pattern: str) -> None:
        """Test that invalid patterns are rejected before any request."""
        result = run("start", "--topic-name-pattern", pattern)

        assert result.exit_code == 2
        assert cluster.requests == []

    def test_not_found(self, run, cluster) -> None:
        """Test the 404 message."""
        cluster.reply(404, {"message": "not found"})

        result = run("start")

        assert result.exit_code == 1
        assert "Not found: not found" in result.output
        assert "Successfully" not in result.output

    def test_already_running(self, run, cluster) -> None:
        """Test the 400 message."""
        cluster.reply(400, {"message": "recovery already running"})

        result = run("start")

        assert result.exit_code == 1
        assert "Cannot start auto-restore: recovery already running" in result.output

    def test_server_error(self, run, cluster) -> None:
        """Test that other statuses print the raw error."""
        cluster.reply(500, {"message": "internal"})

        result = run("start")

        assert result.exit_code == 1
        assert "error starting auto-restore: request POST" in result.output

    def test_unreachable(self, run, cluster) -> None:
        """Test a transport failure."""
        cluster.fail(httpx.ConnectError, "Connection refused")

        result = run("start")

        assert result.exit_code == 1
        assert "error starting auto-restore" in result.output
        assert "Connection refused" in result.output

    def test_bad_config(self, cluster, tmp_path) -> None:
        """Test that config errors stop the command."""
        path = tmp_path / "broken.json"
        path.write_text("{broken")

        result = CliRunner().invoke(cli, ["--config", str(path), "topic", "autorestore", "start"])

        assert result.exit_code == 1
        assert "unable to load config" in result.output
        assert cluster.requests == []

    def test_client_init_failure(self, run) -> None:
        """Test that transport construction errors stop the command."""
        def factory(config):
            raise ValueError("bad certificate")

        result = run("start", factory=factory)

        assert result.exit_code == 1
        assert "unable to initialize admin client: bad certificate" in result.output


class TestStatusCommand:
    """Test `topic autorestore status`."""

    def test_status(self, run, cluster) -> None:
        """Test printing the state."""
        cluster.reply(200, {"state": "inactive"})

        result = run("status")

        assert result.exit_code == 0
        assert "Auto-restore status: inactive" in result.output
        assert cluster.requests[0].method == "GET"

    def test_status_json(self, run, cluster) -> None:
        """Test the full snapshot as JSON."""
        cluster.reply(200, {"state": "recovering_data", "progress": 0.25})

        result = run("status", "--format", "json")

        assert result.exit_code == 0
        assert json.loads(result.output) == {"state": "recovering_data", "progress": 0.25}

    def test_status_failure(self, run, cluster) -> None:
        """Test a failed poll."""
        cluster.reply(404, {"message": "not found"})

        result = run("status")

        assert result.exit_code == 1
        assert "unable to fetch auto-restore status" in result.output

    def test_watch(self, run, cluster) -> None:
        """Test watching until recovery is inactive."""
        cluster.reply(200, {"state": "starting"})
        cluster.reply(200, {"state": "recovering_data"})
        cluster.reply(200, {"state": "recovering_data"})
        cluster.reply(200, {"state": "inactive"})

        result = run("status", "--watch", "--interval", "0.01")

        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line]
        assert lines == [
            "Auto-restore status: starting",
            "Auto-restore status: recovering_data",
            "Auto-restore status: inactive",
        ]

    def test_watch_timeout(self, run, cluster) -> None:
        """Test giving up on a watch."""
        cluster.always(200, {"state": "recovering_data"})

        result = run("status", "--watch", "--interval", "0.01", "--timeout", "0.001")

        assert result.exit_code == 1
        assert "still in state 'recovering_data'" in result.output

    def test_long_state_on_one_line(self, run, cluster) -> None:
        """Test that a state wider than the terminal is not wrapped."""
        state = "recovering_data_" + "x" * 100
        cluster.reply(200, {"state": state})

        result = run("status")

        assert result.exit_code == 0
        assert result.output == f"Auto-restore status: {state}\n"

    def test_long_json_value(self, run, cluster) -> None:
        """Test that long JSON values stay valid JSON."""
        detail = "topic-" + "y" * 150
        cluster.reply(200, {"state": "recovering_data", "current_topic": detail})

        result = run("status", "--format", "json")

        assert result.exit_code == 0
        assert json.loads(result.output)["current_topic"] == detail

    def test_watch_zero_timeout(self, run, cluster) -> None:
        """Test that --timeout 0 gives up after one poll."""
        cluster.always(200, {"state": "recovering_data"})

        result = run("status", "--watch", "--interval", "0.01", "--timeout", "0")

        assert result.exit_code == 1
        assert "still in state 'recovering_data' after 0s" in result.output
        assert len(cluster.requests) == 1

    def test_negative_timeout(self, run, cluster) -> None:
        """Test that a negative --timeout is a usage error."""
        result = run("status", "--watch", "--timeout", "-1")

        assert result.exit_code == 2
        assert cluster.requests == []
