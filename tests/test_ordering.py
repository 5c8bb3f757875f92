"""Tests for the category ordering policy."""

from financial_dashboard.config import DashboardSettings
from financial_dashboard.models.report import CategoryAggregate
from financial_dashboard.processing.ordering import (
    RANK_ADJUSTMENT,
    RANK_OTHER,
    RANK_PRIMARY_REVENUE,
    RANK_REVENUE,
    OrderingPolicy,
    collation_key,
    order_categories,
)


def names_in_order(names: list[str], policy: OrderingPolicy | None = None) -> list[str]:
    """Order bare category names through the policy."""
    aggregates = [CategoryAggregate(name=name) for name in names]
    return [agg.name for agg in order_categories(aggregates, policy)]


class TestOrderingPolicy:
    """Tests for OrderingPolicy ranks and sequence."""

    def test_ranks(self) -> None:
        """Test each precedence bucket."""
        policy = OrderingPolicy()

        assert policy.rank("RESULTADO ASOS") == RANK_ADJUSTMENT
        assert policy.rank("Receita de Vendas") == RANK_PRIMARY_REVENUE
        assert policy.rank("Receita Financeira") == RANK_REVENUE
        assert policy.rank("Aluguel") == RANK_OTHER

    def test_full_sequence(self) -> None:
        """Test adjustment, primary revenue, other revenue, then the rest."""
        names = ["Salários", "Aluguel", "Receita Financeira", "RESULTADO ASOS", "Receita de Vendas"]

        assert names_in_order(names) == [
            "RESULTADO ASOS",
            "Receita de Vendas",
            "Receita Financeira",
            "Aluguel",
            "Salários",
        ]

    def test_primary_revenue_strictly_second(self) -> None:
        """Test the primary revenue category precedes revenue names that collate before it."""
        names = ["Receita Avulsa", "Receita de Vendas", "Receita Bruta"]

        assert names_in_order(names) == ["Receita de Vendas", "Receita Avulsa", "Receita Bruta"]

    def test_revenue_prefix_before_alphabetically_earlier_expense(self) -> None:
        """Test revenue rows come before expenses regardless of spelling."""
        assert names_in_order(["Aluguel", "Receita de Vendas"]) == ["Receita de Vendas", "Aluguel"]

    def test_prefix_is_case_sensitive(self) -> None:
        """Test lowercase "receita" is not treated as revenue."""
        assert OrderingPolicy().rank("receita diversa") == RANK_OTHER

    def test_accent_insensitive_collation(self) -> None:
        """Test accented letters sort with their base letter."""
        names = ["Fornecedores", "Estorno de Serviço", "Empréstimos", "INSS", "Impostos"]

        assert names_in_order(names) == [
            "Empréstimos",
            "Estorno de Serviço",
            "Fornecedores",
            "Impostos",
            "INSS",
        ]

    def test_order_independent_of_input(self) -> None:
        """Test any input permutation yields the same sequence."""
        names = ["Impostos", "RESULTADO ASOS", "Aluguel", "Receita de Vendas"]
        assert names_in_order(names) == names_in_order(list(reversed(names)))

    def test_configured_names(self) -> None:
        """Test the policy follows configured category names."""
        settings = DashboardSettings(
            adjustment_category="Ajustes",
            primary_revenue_category="Vendas",
            revenue_prefix="Rec",
        )
        policy = OrderingPolicy.from_settings(settings)

        assert names_in_order(["Recebimentos", "Aluguel", "Vendas", "Ajustes"], policy) == [
            "Ajustes",
            "Vendas",
            "Recebimentos",
            "Aluguel",
        ]

    def test_accepts_mapping(self) -> None:
        """Test the aggregation mapping can be passed directly."""
        aggregates = {
            "Aluguel": CategoryAggregate(name="Aluguel"),
            "RESULTADO ASOS": CategoryAggregate(name="RESULTADO ASOS"),
        }
        ordered = order_categories(aggregates)
        assert [agg.name for agg in ordered] == ["RESULTADO ASOS", "Aluguel"]


class TestCollationKey:
    """Tests for collation_key."""

    def test_case_insensitive_primary(self) -> None:
        """Test case does not decide before the letters do."""
        assert collation_key("aluguel") < collation_key("Impostos")

    def test_lowercase_first_on_case_tie(self) -> None:
        """Test lowercase sorts before uppercase for otherwise equal names."""
        assert collation_key("inss") < collation_key("INSS")

    def test_unaccented_first_on_accent_tie(self) -> None:
        """Test the unaccented spelling sorts first."""
        assert collation_key("Emprestimos") < collation_key("Empréstimos")
