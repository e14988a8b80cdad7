"""Tests for anthropic client utilities and the AI operations with a mocked client."""

from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from jobtrack.integrations.anthropic_client import (
    RESUME_IMPORT_MAX_CHARS,
    AIGenerationError,
    AIServiceNotConfigured,
    _calculate_cost,
    analyze_job_description,
    extract_resume_profile,
    generate_conversation_starter,
    generate_cover_letter_text,
    get_client,
    select_resume_content,
)


def _message(text: str, input_tokens: int = 100, output_tokens: int = 50):
    block = MagicMock()
    block.type = "text"
    block.text = text
    message = MagicMock()
    message.content = [block]
    message.stop_reason = "end_turn"
    message.usage = anthropic.types.Usage(input_tokens=input_tokens, output_tokens=output_tokens)
    return message


def _client_returning(text: str):
    client = MagicMock()
    client.messages.create.return_value = _message(text)
    return client


class _DictCache:
    def __init__(self):
        self.data = {}

    def get_json(self, key):
        return self.data.get(key)

    def set_json(self, key, data, ttl=60):
        self.data[key] = dict(data)


class TestCalculateCost:
    def test_known_model(self):
        usage = anthropic.types.Usage(input_tokens=1_000_000, output_tokens=1_000_000)
        assert _calculate_cost(usage, "claude-haiku-4-5-20251001") == pytest.approx(4.80)


class TestGetClient:
    def test_missing_key_raises_not_configured(self):
        with patch("jobtrack.integrations.anthropic_client.settings") as mock_settings:
            mock_settings.ai_configured = False
            with pytest.raises(AIServiceNotConfigured):
                get_client()


class TestGenerateCoverLetterText:
    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_returns_letter_and_usage(self, mock_get_client):
        mock_get_client.return_value = _client_returning('{"cover_letter": "  Dear Acme team...  "}')
        result = generate_cover_letter_text("Acme", "Engineer", background="Python dev")
        assert result["cover_letter"] == "Dear Acme team..."
        assert result["tokens"] == {"input": 100, "output": 50, "total": 150}
        assert result["cost_usd"] >= 0

    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_empty_letter_is_an_error(self, mock_get_client):
        mock_get_client.return_value = _client_returning('{"cover_letter": ""}')
        with pytest.raises(AIGenerationError):
            generate_cover_letter_text("Acme", "Engineer")

    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_unparsable_response_is_an_error(self, mock_get_client):
        mock_get_client.return_value = _client_returning("Sorry, no JSON today.")
        with pytest.raises(AIGenerationError):
            generate_cover_letter_text("Acme", "Engineer")

    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_api_error_is_wrapped(self, mock_get_client):
        client = MagicMock()
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client.messages.create.side_effect = anthropic.APIConnectionError(request=request)
        mock_get_client.return_value = client
        with pytest.raises(AIGenerationError):
            generate_cover_letter_text("Acme", "Engineer")
        assert client.messages.create.call_count == 1


class TestAnalyzeJobDescription:
    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_second_call_served_from_cache(self, mock_get_client):
        client = _client_returning('{"requirements": ["5 years Python"], "skills": "Python, SQL", "seniority": "Senior"}')
        mock_get_client.return_value = client
        cache = _DictCache()

        first = analyze_job_description("Senior Python role", cache)
        second = analyze_job_description("Senior Python role", cache)

        assert first["from_cache"] is False
        assert first["skills"] == ["Python", "SQL"]
        assert first["seniority"] == "senior"
        assert second["from_cache"] is True
        assert client.messages.create.call_count == 1


class TestSelectResumeContent:
    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_ids_are_coerced(self, mock_get_client):
        mock_get_client.return_value = _client_returning(
            '{"selected_work_experiences": ["1", {"id": 2}, "x"], "selected_skills": [3], "overall_strategy": "Lead with APIs"}'
        )
        result = select_resume_content(
            "Job text",
            {"requirements": [], "skills": ["Python"]},
            {"work_experiences": [{"id": 1, "job_title": "Dev", "company": "Acme"}]},
            max_work_experiences=4,
            max_projects=3,
            max_skills=12,
        )
        assert result["selected_work_experiences"] == [1, 2]
        assert result["selected_skills"] == [3]
        assert result["selected_projects"] == []
        assert result["overall_strategy"] == "Lead with APIs"


class TestGenerateConversationStarter:
    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_returns_message(self, mock_get_client):
        mock_get_client.return_value = _client_returning('{"message": "Hi Sam, loved your talk on Postgres."}')
        result = generate_conversation_starter("Sam, DB engineer who spoke at PGConf", "Name: Jane")
        assert result["message"].startswith("Hi Sam")

    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_empty_message_is_an_error(self, mock_get_client):
        mock_get_client.return_value = _client_returning('{"message": "   "}')
        with pytest.raises(AIGenerationError):
            generate_conversation_starter("Sam, DB engineer who spoke at PGConf", "Name: Jane")


class TestExtractResumeProfile:
    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_returns_sections_and_usage(self, mock_get_client):
        mock_get_client.return_value = _client_returning(
            '{"profile": {"first_name": "Jane"}, "skills": [{"name": "Python"}], "education": null}'
        )
        result = extract_resume_profile("Jane Doe\nPython")
        assert result["profile"] == {"first_name": "Jane"}
        assert result["skills"] == [{"name": "Python"}]
        assert result["education"] == []
        assert result["tokens"]["total"] == 150

    @patch("jobtrack.integrations.anthropic_client.get_client")
    def test_long_text_truncated(self, mock_get_client):
        client = _client_returning('{"profile": {}}')
        mock_get_client.return_value = client
        extract_resume_profile("x" * (RESUME_IMPORT_MAX_CHARS + 500))
        prompt = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "x" * RESUME_IMPORT_MAX_CHARS in prompt
        assert "x" * (RESUME_IMPORT_MAX_CHARS + 1) not in prompt
