import asyncio
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import httpx

from nukkad_bot.services.alert_service import alert_warning, format_alert, send_alert


class TestSendAlert:
    @patch("nukkad_bot.services.alert_service.ALERT_BOT_TOKEN", None)
    @patch("nukkad_bot.services.alert_service.ALERT_CHAT_ID", None)
    def test_returns_false_when_not_configured(self):
        result = asyncio.run(send_alert("ERROR", "Test message"))
        assert result is False

    @patch("nukkad_bot.services.alert_service.ALERT_BOT_TOKEN", "test-token")
    @patch("nukkad_bot.services.alert_service.ALERT_CHAT_ID", "test-chat")
    @patch("nukkad_bot.services.alert_service.httpx.AsyncClient")
    def test_sends_alert_to_telegram(self, mock_client_class):
        mock_client = MagicMock()
        mock_client_class.return_value.__aenter__.return_value = mock_client

        mock_response = Mock()
        mock_response.status_code = 200
        mock_client.post = AsyncMock(return_value=mock_response)

        result = asyncio.run(send_alert("WARNING", "Session ended"))

        assert result is True
        call_args = mock_client.post.call_args
        assert "api.telegram.org/bottest-token" in call_args[0][0]
        json_data = call_args[1]["json"]
        assert json_data["chat_id"] == "test-chat"
        assert "WARNING" in json_data["text"]

    @patch("nukkad_bot.services.alert_service.ALERT_BOT_TOKEN", "test-token")
    @patch("nukkad_bot.services.alert_service.ALERT_CHAT_ID", "test-chat")
    @patch("nukkad_bot.services.alert_service.httpx.AsyncClient")
    def test_returns_false_on_http_error(self, mock_client_class):
        mock_client = MagicMock()
        mock_client_class.return_value.__aenter__.return_value = mock_client
        mock_client.post = AsyncMock(side_effect=httpx.ConnectError("Connection failed"))

        result = asyncio.run(send_alert("ERROR", "Test message"))

        assert result is False


class TestFormatAlert:
    def test_includes_context(self):
        text = format_alert("ERROR", "Test message", {"cause": "logged_out", "status_code": 401})

        assert "cause: logged_out" in text
        assert "401" in text

    def test_unknown_level_gets_default_emoji(self):
        assert format_alert("DEBUG", "x").startswith("📢")


class TestShortcuts:
    @patch("nukkad_bot.services.alert_service.send_alert", new_callable=AsyncMock)
    def test_alert_warning(self, mock_send):
        mock_send.return_value = True

        result = asyncio.run(alert_warning("Warning message", {"key": "value"}))

        mock_send.assert_awaited_once_with("WARNING", "Warning message", {"key": "value"})
        assert result is True
