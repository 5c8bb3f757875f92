"""Spreadsheet-safe cell values for CSV and Excel exports."""

# Leading characters that make spreadsheet applications evaluate a cell as a
# formula (| covers DDE payloads)
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r", "\n", "|")


def sanitize_cell(value: str | None) -> str:
    """Neutralize text that a spreadsheet would execute as a formula.

    Category names, descriptions and origins come from providers (including a
    generative model), so they are treated as untrusted. Text starting with a
    formula character gets a leading single quote, the OWASP mitigation for
    CSV injection. Numbers are never passed through here.

    Args:
        value: Text to export, or None.

    Returns:
        Safe text ("" for None).
    """
    if not value:
        return ""
    if value.startswith(_FORMULA_PREFIXES):
        return "'" + value
    return value
