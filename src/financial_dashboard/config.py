"""Configuration loading and validation for the financial dashboard."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from financial_dashboard.utils.date_utils import DEFAULT_MONTH_LABELS, MONTHS_PER_YEAR
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "settings.yaml"

DEFAULT_UNITS = ["Matriz", "Filial BH", "Filial AL"]
DEFAULT_ADJUSTMENT_CATEGORY = "RESULTADO ASOS"
DEFAULT_PRIMARY_REVENUE_CATEGORY = "Receita de Vendas"
DEFAULT_REVENUE_PREFIX = "Receita"
DEFAULT_EXPENSE_CATEGORIES = [
    "INSS", "Empréstimos", "Estorno de Serviço", "Salários", "Fornecedores", "Impostos", "Aluguel"
]

VALID_SOURCES = ("mock", "ai", "file")


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def _string_list(data: dict[str, object], key: str, default: list[str]) -> list[str]:
    """Read a list of non-blank strings from a config section."""
    value = data.get(key, default)
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ConfigError(f"'{key}' must be a list of non-empty strings")
    return [v.strip() for v in value]


@dataclass
class DashboardSettings:
    """Domain settings for grouping and ordering.

    Attributes:
        units: Every organizational unit a posting can belong to.
        adjustment_category: Category always shown first and never reported
            as the top expense.
        primary_revenue_category: Category shown right after the adjustment.
        revenue_prefix: Other categories starting with this prefix come next.
        expense_categories: Expense categories used by the generated datasets.
    """

    units: list[str] = field(default_factory=lambda: list(DEFAULT_UNITS))
    adjustment_category: str = DEFAULT_ADJUSTMENT_CATEGORY
    primary_revenue_category: str = DEFAULT_PRIMARY_REVENUE_CATEGORY
    revenue_prefix: str = DEFAULT_REVENUE_PREFIX
    expense_categories: list[str] = field(
        default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES)
    )

    def __post_init__(self) -> None:
        if not self.units:
            raise ConfigError("At least one unit must be configured")
        if len(set(self.units)) != len(self.units):
            raise ConfigError("Unit labels must be unique")

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DashboardSettings":
        """Create from dictionary."""
        return cls(
            units=_string_list(data, "units", DEFAULT_UNITS),
            adjustment_category=str(data.get("adjustment_category", DEFAULT_ADJUSTMENT_CATEGORY)),
            primary_revenue_category=str(
                data.get("primary_revenue_category", DEFAULT_PRIMARY_REVENUE_CATEGORY)
            ),
            revenue_prefix=str(data.get("revenue_prefix", DEFAULT_REVENUE_PREFIX)),
            expense_categories=_string_list(data, "expense_categories", DEFAULT_EXPENSE_CATEGORIES),
        )


@dataclass
class DisplayConfig:
    """Locale-dependent display settings.

    Attributes:
        thousands_separator: Digit grouping separator for amounts.
        month_labels: Twelve month abbreviations, January first.
        period_separator: Joins the first and last active month labels.
        no_comparison_label: Trend text when no comparison is possible.
        trend_template: Trend text; ``{percentage}`` is replaced.
    """

    thousands_separator: str = "."
    month_labels: list[str] = field(default_factory=lambda: list(DEFAULT_MONTH_LABELS))
    period_separator: str = "–"
    no_comparison_label: str = "Sem dados para comparação"
    trend_template: str = "Variação vs mês anterior {percentage}%"

    def __post_init__(self) -> None:
        if len(self.month_labels) != MONTHS_PER_YEAR:
            raise ConfigError(
                f"'month_labels' needs {MONTHS_PER_YEAR} entries, got {len(self.month_labels)}"
            )
        if "{percentage}" not in self.trend_template:
            raise ConfigError("'trend_template' must contain '{percentage}'")

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DisplayConfig":
        """Create from dictionary."""
        defaults = cls()
        return cls(
            thousands_separator=str(data.get("thousands_separator", defaults.thousands_separator)),
            month_labels=_string_list(data, "month_labels", list(DEFAULT_MONTH_LABELS)),
            period_separator=str(data.get("period_separator", defaults.period_separator)),
            no_comparison_label=str(data.get("no_comparison_label", defaults.no_comparison_label)),
            trend_template=str(data.get("trend_template", defaults.trend_template)),
        )


@dataclass
class DataSourceConfig:
    """Where postings come from.

    Attributes:
        source: "mock" (generated), "ai" (generative model), or "file" (JSON).
        seed: Random seed for the generated dataset (None for a random one).
        input_file: JSON file read by the "file" source.
    """

    source: str = "mock"
    seed: Optional[int] = 42
    input_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.source not in VALID_SOURCES:
            raise ConfigError(
                f"Unknown data source '{self.source}', expected one of {', '.join(VALID_SOURCES)}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DataSourceConfig":
        """Create from dictionary."""
        seed = data.get("seed", 42)
        return cls(
            source=str(data.get("source", "mock")),
            seed=int(seed) if seed is not None else None,  # type: ignore[call-overload]
            input_file=str(data["input_file"]) if data.get("input_file") else None,
        )


@dataclass
class AIConfig:
    """Settings for the generative posting provider.

    Attributes:
        api_key_env: Environment variable holding the API key.
        model: Model used for generation.
        max_tokens: Response token limit (a year of postings is a long list).
        retry_attempts: Attempts per request.
        retry_delay: Initial delay between attempts, doubled each retry.
        timeout: Request timeout in seconds.
        min_postings: Lower bound requested from the model.
        max_postings: Upper bound requested from the model.
    """

    api_key_env: str = "ANTHROPIC_API_KEY"
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 16000
    retry_attempts: int = 3
    retry_delay: float = 1.0
    timeout: float = 120.0
    min_postings: int = 60
    max_postings: int = 80

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AIConfig":
        """Create from dictionary."""
        defaults = cls()
        return cls(
            api_key_env=str(data.get("api_key_env", defaults.api_key_env)),
            model=str(data.get("model", defaults.model)),
            max_tokens=int(data.get("max_tokens", defaults.max_tokens)),  # type: ignore[arg-type]
            retry_attempts=int(data.get("retry_attempts", defaults.retry_attempts)),  # type: ignore[arg-type]
            retry_delay=float(data.get("retry_delay", defaults.retry_delay)),  # type: ignore[arg-type]
            timeout=float(data.get("timeout", defaults.timeout)),  # type: ignore[arg-type]
            min_postings=int(data.get("min_postings", defaults.min_postings)),  # type: ignore[arg-type]
            max_postings=int(data.get("max_postings", defaults.max_postings)),  # type: ignore[arg-type]
        )


@dataclass
class OutputConfig:
    """Configuration for exports.

    Attributes:
        currency_symbol: Symbol prefixed to money cells in Excel.
    """

    currency_symbol: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "OutputConfig":
        """Create from dictionary."""
        return cls(currency_symbol=str(data.get("currency_symbol", "")))


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = "WARNING"
    file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "WARNING")),
            file=str(data["file"]) if data.get("file") else None,
        )


@dataclass
class Config:
    """Main configuration container."""

    dashboard: DashboardSettings = field(default_factory=DashboardSettings)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    data_source: DataSourceConfig = field(default_factory=DataSourceConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML mapping.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content ({} for an empty file).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object] | None:
    """Return a config section, checking it is a mapping."""
    section = data.get(name)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def config_from_dict(data: dict[str, object]) -> Config:
    """Build a Config from parsed settings data.

    Args:
        data: Settings mapping (sections are optional).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If a section is malformed.
    """
    config = Config()

    section = _section(data, "dashboard")
    if section is not None:
        config.dashboard = DashboardSettings.from_dict(section)

    section = _section(data, "display")
    if section is not None:
        config.display = DisplayConfig.from_dict(section)

    section = _section(data, "data_source")
    if section is not None:
        config.data_source = DataSourceConfig.from_dict(section)

    section = _section(data, "ai")
    if section is not None:
        config.ai = AIConfig.from_dict(section)

    section = _section(data, "output")
    if section is not None:
        config.output = OutputConfig.from_dict(section)

    section = _section(data, "logging")
    if section is not None:
        config.logging = LoggingConfig.from_dict(section)

    return config


def load_config(settings_path: Optional[Path] = None) -> Config:
    """Load configuration from settings.yaml.

    A missing file is not an error: the built-in defaults describe the
    standard three-unit dataset.

    Args:
        settings_path: Path to settings.yaml (default: config/settings.yaml).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    if settings_path is None:
        settings_path = DEFAULT_CONFIG_PATH

    if not settings_path.exists():
        logger.warning(f"Settings file not found: {settings_path}, using defaults")
        return Config()

    config = config_from_dict(load_yaml_file(settings_path))
    logger.info(
        f"Loaded settings from {settings_path}: {len(config.dashboard.units)} units, "
        f"source={config.data_source.source}"
    )
    return config
