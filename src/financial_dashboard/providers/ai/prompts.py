"""Prompt templates for generating postings with a language model."""

from financial_dashboard.config import DashboardSettings

GENERATION_SYSTEM_PROMPT = """You generate realistic bookkeeping data for a \
small Brazilian company. Every answer is a JSON array of posting objects.

Each posting has exactly these keys:
- "id": unique string identifier
- "category": category name, exactly as listed by the user
- "date": calendar date formatted YYYY-MM-DD
- "description": short description in Brazilian Portuguese
- "origin": who the money came from or went to (bank, customer, supplier)
- "unit": branch name, exactly as listed by the user
- "amount": number, negative for expenses and positive for revenue

Response format: Raw JSON only - no markdown code blocks, no explanation outside the JSON."""


def build_generation_prompt(
    year: int,
    settings: DashboardSettings,
    min_postings: int = 60,
    max_postings: int = 80,
) -> str:
    """Build the user prompt asking for one year of postings.

    Args:
        year: Year the postings must fall in.
        settings: Units and category names to use.
        min_postings: Minimum number of postings requested.
        max_postings: Maximum number of postings requested.

    Returns:
        Formatted prompt string.
    """
    categories = [*settings.expense_categories, settings.primary_revenue_category]
    category_list = "\n".join(f"- {name}" for name in categories)
    unit_list = ", ".join(f"'{unit}'" for unit in settings.units)

    return f"""Generate between {min_postings} and {max_postings} postings for the year {year}.

Categories:
{category_list}

Rules:
- '{settings.primary_revenue_category}' is always positive (money coming in).
- All other listed categories are mostly negative (expenses).
- Add 2 or 3 postings in the category '{settings.adjustment_category}' with small negative amounts.
- The unit of every posting is one of: {unit_list}.
- Spread dates from January to November of {year}; leave some months without \
postings for some categories.
- Every id is unique.

Respond with the JSON array only."""
