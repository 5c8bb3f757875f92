"""Tests for posting providers."""

import json
import logging
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from financial_dashboard.config import AIConfig, Config, DashboardSettings
from financial_dashboard.providers import (
    AIPostingProvider,
    JSONFilePostingProvider,
    MissingCredentialsError,
    MockPostingProvider,
    ProviderError,
    create_provider,
)
from financial_dashboard.providers.ai.client import (
    AIClient,
    AIClientError,
    AIResponse,
    APIKeyNotFoundError,
)


def create_record(posting_id: str, **overrides: object) -> dict[str, object]:
    """Helper to create a raw posting record."""
    record: dict[str, object] = {
        "id": posting_id,
        "category": "Receita de Vendas",
        "date": "2024-04-10",
        "description": "Venda",
        "origin": "Cliente A",
        "unit": "Matriz",
        "amount": 1200,
    }
    record.update(overrides)
    return record


class TestMockPostingProvider:
    """Tests for the generated dataset."""

    def test_deterministic_for_seed(self) -> None:
        """Test equal seeds produce equal datasets."""
        first = MockPostingProvider(seed=5, reference_year=2024).fetch(2024)
        second = MockPostingProvider(seed=5, reference_year=2024).fetch(2024)
        assert first == second

    def test_three_years(self) -> None:
        """Test the reference year and the two before it are generated."""
        provider = MockPostingProvider(reference_year=2024)

        assert provider.years == [2024, 2023, 2022]
        assert provider.fetch(2022)
        assert provider.fetch(2021) == []

    def test_dataset_shape(self) -> None:
        """Test counts, ranges and units of one generated year."""
        postings = MockPostingProvider(seed=9, reference_year=2024).fetch(2024)
        by_category: dict[str, list] = {}
        for posting in postings:
            by_category.setdefault(posting.category, []).append(posting)

        assert len(by_category["Receita de Vendas"]) == 20
        assert len(by_category["Salários"]) == 10
        assert len(by_category["Empréstimos"]) == 4
        assert len(by_category["Estorno de Serviço"]) == 4
        assert len(by_category["RESULTADO ASOS"]) == 3
        assert len(postings) == 20 + 5 * 10 + 2 * 4 + 3

        assert all(5000 <= p.amount <= 29999 for p in by_category["Receita de Vendas"])
        assert all(-9999 <= p.amount <= -1000 for p in by_category["Aluguel"])
        assert all(-349 <= p.amount <= -50 for p in by_category["RESULTADO ASOS"])
        assert all(p.unit == "Matriz" for p in by_category["RESULTADO ASOS"])
        assert all(1 <= p.date.month <= 11 and p.date.day <= 28 for p in postings)

    def test_unique_ids(self) -> None:
        """Test ids are unique across all generated years."""
        provider = MockPostingProvider(reference_year=2024)
        ids = [p.id for year in provider.years for p in provider.fetch(year)]
        assert len(ids) == len(set(ids))


class TestJSONFilePostingProvider:
    """Tests for the JSON file provider."""

    def test_reads_array(self, tmp_path: Path) -> None:
        """Test a JSON array is parsed and filtered by year."""
        path = tmp_path / "postings.json"
        records = [create_record("a"), create_record("b", date="2023-05-01")]
        path.write_text(json.dumps(records), encoding="utf-8")

        provider = JSONFilePostingProvider(path)

        assert [p.id for p in provider.fetch(2024)] == ["a"]
        assert [p.id for p in provider.fetch(2023)] == ["b"]

    def test_reads_wrapped_object(self, tmp_path: Path) -> None:
        """Test an object with a "postings" key is accepted."""
        path = tmp_path / "postings.json"
        path.write_text(json.dumps({"postings": [create_record("a")]}), encoding="utf-8")

        assert len(JSONFilePostingProvider(path).fetch(2024)) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is a provider error."""
        provider = JSONFilePostingProvider(tmp_path / "missing.json")

        with pytest.raises(ProviderError, match="not found"):
            provider.fetch(2024)

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test broken JSON is a provider error."""
        path = tmp_path / "postings.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(ProviderError, match="Invalid JSON"):
            JSONFilePostingProvider(path).fetch(2024)

    def test_non_utf8_file(self, tmp_path: Path) -> None:
        """Test a Latin-1 encoded file is a provider error."""
        path = tmp_path / "postings.json"
        path.write_bytes(b'[{"id": "1", "category": "Sal\xe1rios"}]')

        with pytest.raises(ProviderError, match="Cannot decode"):
            JSONFilePostingProvider(path).fetch(2024)

    def test_not_an_array(self, tmp_path: Path) -> None:
        """Test a scalar document is rejected."""
        path = tmp_path / "postings.json"
        path.write_text("42", encoding="utf-8")

        with pytest.raises(ProviderError, match="JSON array"):
            JSONFilePostingProvider(path).fetch(2024)

    def test_malformed_record_rejects_file(self, tmp_path: Path) -> None:
        """Test one malformed record fails the whole load."""
        path = tmp_path / "postings.json"
        records = [create_record("a"), create_record("b", amount=None)]
        path.write_text(json.dumps(records), encoding="utf-8")

        with pytest.raises(ProviderError, match="Invalid postings"):
            JSONFilePostingProvider(path).fetch(2024)


class TestAIPostingProvider:
    """Tests for the generative provider with a mocked client."""

    def create_client(self, text: str) -> MagicMock:
        client = MagicMock()
        client.send_message.return_value = AIResponse(text=text)
        client.parse_json_response.side_effect = json.loads
        return client

    def test_parses_generated_postings(self) -> None:
        """Test a JSON array from the model becomes postings."""
        records = [create_record("a"), create_record("b", category="Aluguel", amount=-300)]
        client = self.create_client(json.dumps(records))
        provider = AIPostingProvider(client=client)

        postings = provider.fetch(2024)

        assert [p.id for p in postings] == ["a", "b"]
        system_prompt, user_prompt = client.send_message.call_args.args
        assert "JSON" in system_prompt
        assert "2024" in user_prompt
        assert "RESULTADO ASOS" in user_prompt

    def test_logs_token_usage(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a successful generation logs the request and token counts."""
        client = AIClient(config=AIConfig(retry_delay=0.0))
        client._client = MagicMock()
        client._client.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(text=json.dumps([create_record("a")]))],
            usage=SimpleNamespace(input_tokens=120, output_tokens=80),
            stop_reason="end_turn",
        )
        provider = AIPostingProvider(client=client)

        with caplog.at_level(logging.INFO, logger="financial_dashboard"):
            postings = provider.fetch(2024)

        assert [p.id for p in postings] == ["a"]
        assert "1 request(s)" in caplog.text
        assert "80 output tokens" in caplog.text

    def test_missing_api_key(self) -> None:
        """Test a missing key surfaces as MissingCredentialsError."""
        client = MagicMock()
        client.send_message.side_effect = APIKeyNotFoundError("API key not found")
        provider = AIPostingProvider(client=client)

        with pytest.raises(MissingCredentialsError, match="Failed to generate financial data"):
            provider.fetch(2024)

    def test_api_failure(self) -> None:
        """Test client errors become ProviderError with a hint."""
        client = MagicMock()
        client.send_message.side_effect = AIClientError("Request failed after 3 attempts")
        provider = AIPostingProvider(client=client)

        with pytest.raises(ProviderError, match="API key"):
            provider.fetch(2024)

    def test_unparseable_output(self) -> None:
        """Test invalid JSON from the model is a provider error."""
        client = MagicMock()
        client.send_message.return_value = AIResponse(text="no json here")
        client.parse_json_response.side_effect = ValueError("No JSON found")
        provider = AIPostingProvider(client=client)

        with pytest.raises(ProviderError, match="invalid JSON"):
            provider.fetch(2024)

    def test_malformed_records(self) -> None:
        """Test malformed generated records reject the batch."""
        client = self.create_client(json.dumps([create_record("a", date="sometime")]))
        provider = AIPostingProvider(client=client)

        with pytest.raises(ProviderError, match="record 0"):
            provider.fetch(2024)

    def test_non_array_output(self) -> None:
        """Test a JSON scalar is rejected."""
        client = self.create_client("7")
        provider = AIPostingProvider(client=client)

        with pytest.raises(ProviderError, match="JSON array"):
            provider.fetch(2024)


class TestCreateProvider:
    """Tests for create_provider."""

    def test_default_is_mock(self) -> None:
        """Test the default configuration generates data."""
        provider = create_provider(Config())

        assert isinstance(provider, MockPostingProvider)
        assert provider.seed == 42

    def test_seed_override(self) -> None:
        """Test the seed argument wins over settings."""
        provider = create_provider(Config(), seed=7)
        assert provider.seed == 7  # type: ignore[attr-defined]

    def test_ai_source(self) -> None:
        """Test the ai source builds the generative provider."""
        assert isinstance(create_provider(Config(), source="ai"), AIPostingProvider)

    def test_file_source_requires_path(self) -> None:
        """Test the file source without a path is rejected."""
        with pytest.raises(ProviderError, match="input file"):
            create_provider(Config(), source="file")

    def test_file_source(self, tmp_path: Path) -> None:
        """Test the file source uses the given path."""
        provider = create_provider(
            Config(), source="file", input_file=str(tmp_path / "postings.json")
        )
        assert isinstance(provider, JSONFilePostingProvider)

    def test_unknown_source(self) -> None:
        """Test an unknown source name is rejected."""
        with pytest.raises(ProviderError, match="Unknown data source"):
            create_provider(Config(), source="sql")

    def test_settings_passed_to_mock(self) -> None:
        """Test configured units reach the generator."""
        config = Config(dashboard=DashboardSettings(units=["Sede"]))
        provider = create_provider(config)

        postings = provider.fetch(provider.years[0])  # type: ignore[attr-defined]
        assert {p.unit for p in postings} == {"Sede"}
