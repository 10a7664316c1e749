"""Unit tests for CLI commands."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from cli import app
from diver import __version__
from diver.core.exceptions import AuthenticationError, TransportError
from diver.store.client import StoreClient, StoreCredentials
from diver.ucp.credentials import Credentials

runner = CliRunner()


@pytest.fixture
def ucp(control_plane, monkeypatch):
    """Route every UCP command through the fake control plane."""
    monkeypatch.setattr("diver.cli.commands.service.get_ucp_client", control_plane.client)
    monkeypatch.setattr("diver.cli.commands.auth.get_ucp_client", control_plane.client)
    return control_plane


class TestMainApp:
    """Tests for main app options."""

    def test_help(self) -> None:
        """Test main help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Docker UCP" in result.output

    def test_version(self) -> None:
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.output.strip() == __version__

    def test_verbose_flag(self) -> None:
        """Test verbose flag is accepted."""
        result = runner.invoke(app, ["-v", "version"])
        assert result.exit_code == 0

    def test_debug_flag(self) -> None:
        """Test debug flag is accepted."""
        result = runner.invoke(app, ["--debug", "version"])
        assert result.exit_code == 0
        assert "Debug mode enabled" in result.output

    def test_invalid_settings_exit_1(self, write_settings) -> None:
        """Test a bad settings file is reported without a traceback."""
        write_settings("ucp.yaml", "timout: 5\n")

        result = runner.invoke(app, ["version"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "ucp.yaml" in result.output
        assert "Traceback" not in result.output


class TestServiceCommands:
    """Tests for diver ucp service."""

    def test_list_services(self, ucp, service_payload) -> None:
        """Test listing all services."""
        ucp.add("GET", "/services", json=[service_payload("s1", "web")])

        result = runner.invoke(app, ["ucp", "service", "list"])

        assert result.exit_code == 0
        assert "web" in result.output

    def test_list_tasks_with_resolution(self, ucp, service_payload, task_payload, node_payload) -> None:
        """Test examining one service with node names."""
        ucp.add("GET", "/services/web", json=service_payload("svc1", "web"))
        ucp.add("GET", "/tasks", json=[task_payload("t1", node_id="n1")])
        ucp.add("GET", "/nodes", json=[node_payload("n1", "worker-1")])

        result = runner.invoke(app, ["ucp", "service", "list", "--name", "web", "--node", "--resolve"])

        assert result.exit_code == 0
        assert "web.1" in result.output
        assert "worker-1" in result.output

    def test_list_tasks_of_idle_service(self, ucp, service_payload) -> None:
        """Test a service with no tasks."""
        ucp.add("GET", "/services/web", json=service_payload("svc1", "web"))
        ucp.add("GET", "/tasks", json=[])

        result = runner.invoke(app, ["ucp", "service", "list", "--name", "web"])

        assert result.exit_code == 0
        assert "No tasks found" in result.output

    def test_architecture(self, ucp, urchin_payload) -> None:
        """Test printing the current spec."""
        ucp.add("GET", "/services/urchin", json=urchin_payload)

        result = runner.invoke(app, ["ucp", "service", "architecture", "urchin"])

        assert result.exit_code == 0
        assert "Replicas:" in result.output
        assert "4194304" in result.output

    def test_architecture_piped_keeps_values_whole(self, ucp, urchin_payload, monkeypatch) -> None:
        """Test piped output keeps the full image on one line without padding."""
        monkeypatch.delenv("COLUMNS", raising=False)
        ucp.add("GET", "/services/urchin", json=urchin_payload)

        result = runner.invoke(app, ["ucp", "service", "architecture", "urchin"])

        assert result.exit_code == 0
        image = urchin_payload["Spec"]["TaskTemplate"]["ContainerSpec"]["Image"]
        assert image in result.output
        assert all(line == line.rstrip() for line in result.output.splitlines())

    def test_non_service_body_exits_1(self, ucp) -> None:
        """Test a 200 body that is not a service fails instead of printing blanks."""
        ucp.add("GET", "/services/web", json={"error": "denied", "status": 500})

        result = runner.invoke(app, ["ucp", "service", "architecture", "web"])

        assert result.exit_code == 1
        assert "Unexpected response" in result.output
        assert "ID:" not in result.output

    def test_architecture_previous_spec(self, ucp, urchin_payload) -> None:
        """Test printing the previous spec with the legacy flag spelling."""
        ucp.add("GET", "/services/urchin", json=urchin_payload)

        result = runner.invoke(app, ["ucp", "service", "architecture", "urchin", "--previousSpec"])

        assert result.exit_code == 0
        assert "102410241" in result.output
        assert "Reservation" not in result.output

    def test_missing_service_exits_1(self, ucp) -> None:
        """Test a 404 is reported as not found."""
        result = runner.invoke(app, ["ucp", "service", "architecture", "ghost"])

        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_error_envelope_exits_1(self, ucp) -> None:
        """Test an error envelope on HTTP 200 fails the command."""
        ucp.add("GET", "/services", json={"message": "access denied"})

        result = runner.invoke(app, ["ucp", "service", "list"])

        assert result.exit_code == 1
        assert "access denied" in result.output

    def test_no_token_exits_1(self, monkeypatch) -> None:
        """Test a missing token file is fatal."""
        def no_token():
            raise AuthenticationError("No credentials found")

        monkeypatch.setattr("diver.cli.commands.service.get_ucp_client", no_token)

        result = runner.invoke(app, ["ucp", "service", "list"])

        assert result.exit_code == 1
        assert "Authentication failed" in result.output

    def test_unreachable_exits_1(self, monkeypatch) -> None:
        """Test a transport failure is reported."""
        def unreachable():
            raise TransportError("connection refused")

        monkeypatch.setattr("diver.cli.commands.service.get_ucp_client", unreachable)

        result = runner.invoke(app, ["ucp", "service", "list"])

        assert result.exit_code == 1
        assert "Cannot reach server" in result.output


class TestAuthCommands:
    """Tests for diver ucp auth."""

    def test_grants_resolved(self, ucp) -> None:
        """Test grants with names."""
        ucp.add("GET", "/collectionGrants", json={"grants": [
            {"objectID": "swarm", "roleID": "r1", "subjectID": "u1"},
        ]})
        ucp.add("GET", "/accounts/", json={"accounts": [{"id": "u1", "name": "alice"}]})
        ucp.add("GET", "/roles", json=[{"id": "r1", "name": "viewonly"}])
        ucp.add("GET", "/collections", json=[{"id": "swarm", "name": "swarm", "path": "/Shared"}])

        result = runner.invoke(app, ["ucp", "auth", "grants", "--resolve"])

        assert result.exit_code == 0
        assert "alice" in result.output
        assert "viewonly" in result.output

    def test_accounts(self, ucp) -> None:
        """Test listing accounts."""
        ucp.add("GET", "/accounts/", json={"accounts": [{"id": "u1", "name": "alice"}]})

        result = runner.invoke(app, ["ucp", "auth", "accounts"])

        assert result.exit_code == 0
        assert "alice" in result.output


class TestLoginCommands:
    """Tests for login commands."""

    def test_ucp_login_writes_token(self, write_settings, tmp_path) -> None:
        """Test UCP login stores the returned token."""
        token_path = tmp_path / "ucptoken"
        write_settings("ucp.yaml", f"token_path: {token_path}\n")
        credentials = Credentials(url="https://ucp.test", token="abc", user="admin")

        with patch("diver.cli.commands.ucp.ucp_login", return_value=credentials) as login:
            result = runner.invoke(
                app, ["ucp", "login", "--url", "https://ucp.test", "-u", "admin", "-p", "pw", "--ignore-cert"],
            )

        assert result.exit_code == 0
        assert token_path.exists()
        login.assert_called_once_with("https://ucp.test", "admin", "pw", verify_tls=False)

    def test_ucp_login_uses_env_credentials(self, write_settings, tmp_path, monkeypatch) -> None:
        """Test user name and password fall back to the environment."""
        write_settings("ucp.yaml", f"token_path: {tmp_path / 'ucptoken'}\n")
        monkeypatch.setenv("DIVER_UCP_USERNAME", "envuser")
        monkeypatch.setenv("DIVER_UCP_PASSWORD", "envpass")
        credentials = Credentials(url="https://ucp.test", token="abc", user="envuser")

        with patch("diver.cli.commands.ucp.ucp_login", return_value=credentials) as login:
            result = runner.invoke(app, ["ucp", "login", "--url", "https://ucp.test"])

        assert result.exit_code == 0
        login.assert_called_once_with("https://ucp.test", "envuser", "envpass", verify_tls=None)

    def test_ucp_login_rejected(self, tmp_path) -> None:
        """Test rejected credentials exit 1."""
        with patch("diver.cli.commands.ucp.ucp_login", side_effect=AuthenticationError("invalid password")):
            result = runner.invoke(app, ["ucp", "login", "--url", "https://ucp.test", "-u", "a", "-p", "b"])

        assert result.exit_code == 1
        assert "invalid password" in result.output

    def test_store_login_writes_token(self, write_settings, tmp_path) -> None:
        """Test Docker Hub login stores the JWT and Docker ID."""
        token_path = tmp_path / "dockerstore"
        write_settings("store.yaml", f"token_path: {token_path}\n")
        credentials = StoreCredentials(token="jwt", docker_id="d0c", user="operator")

        with patch("diver.cli.commands.store.store_login", return_value=credentials):
            result = runner.invoke(app, ["store", "login", "-u", "operator", "-p", "pw"])

        assert result.exit_code == 0
        assert "d0c" in token_path.read_text()


class TestStoreCommands:
    """Tests for subscription commands."""

    @pytest.fixture
    def store(self, monkeypatch):
        import httpx

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[
                {"name": "Docker EE", "subscription_id": "sub-1", "state": "cancelled"},
                {"name": "Docker EE", "subscription_id": "sub-2", "state": "active"},
                {"name": "[bold]Trial[/bold]", "subscription_id": "[sub-3]", "state": "expired"},
            ])

        credentials = StoreCredentials(token="jwt", docker_id="d0c")
        monkeypatch.setattr(
            "diver.cli.commands.store.get_store_client",
            lambda: StoreClient(credentials, transport=httpx.MockTransport(handler)),
        )

    def test_active_prints_subscription_id(self, store) -> None:
        """Test the first active subscription ID is printed alone."""
        result = runner.invoke(app, ["store", "active"])

        assert result.exit_code == 0
        assert result.output.strip() == "sub-2"

    def test_subscriptions_table(self, store) -> None:
        """Test all subscriptions are listed."""
        result = runner.invoke(app, ["store", "subscriptions"])

        assert result.exit_code == 0
        assert "sub-1" in result.output
        assert "sub-2" in result.output

    def test_subscription_names_printed_literally(self, store) -> None:
        """Test brackets in names and IDs are not read as console markup."""
        result = runner.invoke(app, ["store", "subscriptions"])

        assert result.exit_code == 0
        assert "[bold]Trial[/bold]" in result.output
        assert "[sub-3]" in result.output
