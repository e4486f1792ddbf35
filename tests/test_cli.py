"""Tests for cli/manage.py: argument handling and exit codes."""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mcpconductor.cli import manage
from mcpconductor.cli.helper_functions import save_results_to_file
from mcpconductor.errors import QueryProcessingError, ServerConnectionError
from mcpconductor.orchestrator.dispatch import ConcurrentDispatcher


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    for key in ("LLM_PROVIDER", "LLM_MODEL", "OPENAI_API_KEY", "MCP_SERVER_CONFIG", "SYSTEM_PROMPT"):
        monkeypatch.delenv(key, raising=False)
    with patch("mcpconductor.cli.manage.configure_logging"), \
            patch("mcpconductor.cli.manage.console", MagicMock()):
        yield


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "servers.json"
    path.write_text(json.dumps({"mcpServers": {"weather": {"command": "python"}}}))
    return str(path)


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.connect_to_servers = AsyncMock()
    client.process_query = AsyncMock(return_value="72F sunny")
    client.chat_loop = AsyncMock()
    client.cleanup = AsyncMock()
    with patch("mcpconductor.cli.manage.MCPClient") as client_class:
        client_class.from_settings.return_value = client
        yield client_class, client


class TestMain:
    @pytest.mark.asyncio
    async def test_single_query(self, config_file, mock_client):
        client_class, client = mock_client

        code = await manage.main(["-c", config_file, "--model", "gpt-4o", "What's the weather?"])

        assert code == 0
        client.process_query.assert_awaited_once_with("What's the weather?")
        client.chat_loop.assert_not_awaited()
        client.cleanup.assert_awaited_once()

        settings = client_class.from_settings.call_args.args[0]
        assert settings.model == "gpt-4o"
        assert settings.server_config_path == config_file

    @pytest.mark.asyncio
    async def test_interactive_without_query(self, config_file, mock_client):
        _, client = mock_client

        assert await manage.main(["-c", config_file]) == 0
        client.chat_loop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_tool_options(self, config_file, mock_client):
        client_class, _ = mock_client

        await manage.main(["-c", config_file, "--concurrent-tools", "--rollback",
                           "--max-tool-rounds", "3", "hi"])

        settings = client_class.from_settings.call_args.args[0]
        kwargs = client_class.from_settings.call_args.kwargs
        assert settings.max_tool_rounds == 3
        assert isinstance(kwargs["dispatcher"], ConcurrentDispatcher)
        assert kwargs["rollback_on_failure"] is True

    @pytest.mark.asyncio
    async def test_connect_failure_exit_code(self, config_file, mock_client):
        _, client = mock_client
        client.connect_to_servers.side_effect = ServerConnectionError("weather")

        assert await manage.main(["-c", config_file, "hi"]) == 1
        client.cleanup.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_query_failure_exit_code(self, config_file, mock_client):
        _, client = mock_client
        client.process_query.side_effect = QueryProcessingError(RuntimeError("boom"))

        assert await manage.main(["-c", config_file, "hi"]) == 1

    @pytest.mark.asyncio
    async def test_missing_config(self, tmp_path, mock_client):
        client_class, _ = mock_client
        assert await manage.main(["-c", str(tmp_path / "nope.json"), "hi"]) == 1
        client_class.from_settings.assert_not_called()

    @pytest.mark.asyncio
    async def test_init_config(self, tmp_path, mock_client):
        path = tmp_path / "config" / "servers.json"

        assert await manage.main(["-c", str(path), "--init-config"]) == 0
        assert "weather" in json.loads(path.read_text())["mcpServers"]

    @pytest.mark.asyncio
    async def test_output_file(self, config_file, mock_client, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        await manage.main(["-c", config_file, "-o", "result.json", "weather?"])

        saved = json.loads((tmp_path / "output" / "result.json").read_text())
        assert saved == {"query": "weather?", "response": "72F sunny"}


class TestHelpers:
    def test_save_results_to_file(self, tmp_path):
        path = save_results_to_file({"query": "q"}, "out.json", output_dir=str(tmp_path / "out"))
        assert json.loads(open(path).read()) == {"query": "q"}

    def test_parser_rejects_unknown_provider(self):
        with pytest.raises(SystemExit):
            manage.build_parser().parse_args(["--provider", "llamacpp"])
