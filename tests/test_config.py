"""Tests for configuration loading."""

from pathlib import Path

import pytest

from financial_dashboard.config import (
    Config,
    ConfigError,
    DashboardSettings,
    DataSourceConfig,
    DisplayConfig,
    config_from_dict,
    load_config,
)


class TestConfigDefaults:
    """Tests for built-in defaults."""

    def test_default_units_and_categories(self) -> None:
        """Test the standard three-unit setup."""
        config = Config()

        assert config.dashboard.units == ["Matriz", "Filial BH", "Filial AL"]
        assert config.dashboard.adjustment_category == "RESULTADO ASOS"
        assert config.dashboard.primary_revenue_category == "Receita de Vendas"
        assert config.display.month_labels[0] == "Jan"
        assert config.display.month_labels[11] == "Dez"
        assert config.data_source.source == "mock"

    def test_duplicate_units_rejected(self) -> None:
        """Test unit labels must be unique."""
        with pytest.raises(ConfigError, match="unique"):
            DashboardSettings(units=["Matriz", "Matriz"])

    def test_empty_units_rejected(self) -> None:
        """Test at least one unit is required."""
        with pytest.raises(ConfigError):
            DashboardSettings(units=[])

    def test_month_labels_count(self) -> None:
        """Test exactly twelve month labels are required."""
        with pytest.raises(ConfigError, match="12"):
            DisplayConfig(month_labels=["Jan"])

    def test_trend_template_placeholder(self) -> None:
        """Test the trend template needs its placeholder."""
        with pytest.raises(ConfigError, match="percentage"):
            DisplayConfig(trend_template="Variação")

    def test_unknown_source(self) -> None:
        """Test unknown data sources are rejected."""
        with pytest.raises(ConfigError, match="Unknown data source"):
            DataSourceConfig(source="sql")


class TestConfigFromDict:
    """Tests for config_from_dict."""

    def test_partial_sections(self) -> None:
        """Test omitted sections and keys keep their defaults."""
        config = config_from_dict(
            {
                "dashboard": {"units": ["Sede", "Loja"]},
                "ai": {"model": "claude-test", "max_postings": 40},
            }
        )

        assert config.dashboard.units == ["Sede", "Loja"]
        assert config.dashboard.adjustment_category == "RESULTADO ASOS"
        assert config.ai.model == "claude-test"
        assert config.ai.max_postings == 40
        assert config.ai.min_postings == 60
        assert config.display.thousands_separator == "."

    def test_section_must_be_mapping(self) -> None:
        """Test a scalar section is a config error."""
        with pytest.raises(ConfigError, match="dashboard"):
            config_from_dict({"dashboard": "Matriz"})

    def test_units_must_be_strings(self) -> None:
        """Test non-string units are rejected."""
        with pytest.raises(ConfigError, match="units"):
            config_from_dict({"dashboard": {"units": ["Matriz", 3]}})

    def test_null_seed(self) -> None:
        """Test a null seed means a random dataset."""
        config = config_from_dict({"data_source": {"seed": None}})
        assert config.data_source.seed is None


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        """Test a missing settings file is not an error."""
        config = load_config(tmp_path / "missing.yaml")
        assert config.dashboard.units == ["Matriz", "Filial BH", "Filial AL"]

    def test_loads_yaml(self, tmp_path: Path) -> None:
        """Test values are read from YAML."""
        path = tmp_path / "settings.yaml"
        path.write_text(
            "dashboard:\n"
            "  units: [Matriz, Filial SP]\n"
            "display:\n"
            "  thousands_separator: ','\n"
            "output:\n"
            "  currency_symbol: 'R$ '\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.dashboard.units == ["Matriz", "Filial SP"]
        assert config.display.thousands_separator == ","
        assert config.output.currency_symbol == "R$ "

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file yields defaults."""
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path).data_source.seed == 42

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test broken YAML raises ConfigError."""
        path = tmp_path / "settings.yaml"
        path.write_text("dashboard: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        """Test a top-level list is rejected."""
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_shipped_settings_file(self) -> None:
        """Test the example settings in config/ load cleanly."""
        path = Path(__file__).parent.parent / "config" / "settings.yaml"
        config = load_config(path)

        assert config.dashboard.expense_categories[1] == "Empréstimos"
        assert config.display.period_separator == "–"
