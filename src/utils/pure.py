from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Literal, Optional, Sequence

_ALIGN_RULES = {"l": ":---", "c": ":---:", "r": "---:"}
_CENT = Decimal("0.01")


def _cell(value: object) -> str:
    return str(value).replace("|", "\\|")


def generate_markdown_table(
    headers: Sequence[object],
    rows: Iterable[Sequence[object]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
    empty_text: str = "No data found.",
) -> str:
    """
    Render rows as a Markdown table.

    Args:
        headers: column headers.
        rows: one sequence of cells per row, cells are str()-ed with pipes escaped.
        aligns: 'l', 'c' or 'r' per column, left-aligned by default.
        empty_text: returned instead of a table when there are no rows.
    """
    rows = [[_cell(c) for c in row] for row in rows]
    if not rows:
        return f"_{empty_text}_"

    aligns = aligns or ["l"] * len(headers)
    if len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    lines = [
        "| " + " | ".join(_cell(h) for h in headers) + " |",
        "| " + " | ".join(_ALIGN_RULES[a] for a in aligns) + " |",
    ]
    lines += ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join(lines)


def round_money(amount: float) -> float:
    """Round to cents, halves away from zero (13.125 -> 13.13)."""
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def format_money(amount: float) -> str:
    return f"${round_money(amount):,.2f}"


def status_markup(status: str) -> str:
    """Rich markup for an order/product status badge."""
    color = {
        "Completed": "green",
        "Active": "green",
        "Pending": "yellow",
        "Inactive": "red",
    }.get(status, "white")
    return f"[{color}]{status}[/]"
