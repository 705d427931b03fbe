"""
Table and JSON rendering helpers.
"""

import json
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from rich import box
from rich.table import Table

from ..api.models import Number, NumberOrText, PlatformModel


NOT_AVAILABLE = "N/A"


def build_table(*headers: str, title: Optional[str] = None) -> Table:
    """Plain, borderless table with one column per header."""
    table = Table(
        title=title,
        box=box.SIMPLE_HEAD,
        show_edge=False,
        header_style="bold cyan",
        pad_edge=False,
    )
    for header in headers:
        table.add_column(header, overflow="fold")
    return table


def or_na(value: Optional[str]) -> str:
    return value if value else NOT_AVAILABLE


def format_timestamp(value: Optional[str], fmt: str = "%Y-%m-%d") -> str:
    """
    Render a millisecond epoch timestamp in local time.

    Returns an empty string when the value is missing or not numeric.
    """
    if not value:
        return ""
    try:
        moment = datetime.fromtimestamp(int(value) // 1000)
    except (ValueError, OverflowError, OSError):
        return ""
    return moment.strftime(fmt)


def format_number_or_text(value: Optional[NumberOrText], suffix: str = "") -> str:
    """Whole-number rendering for numbers; text is shown unchanged."""
    if value is None:
        return ""
    if isinstance(value, Number):
        return f"{value.value:.0f}{suffix}"
    return value.value


def to_json(items: Union[PlatformModel, Iterable[PlatformModel], Any]) -> str:
    """Indented JSON in platform (camelCase) field names."""
    if isinstance(items, PlatformModel):
        data = items.to_dict()
    elif isinstance(items, dict):
        data = items
    else:
        data = [item.to_dict() if isinstance(item, PlatformModel) else item for item in items]
    return json.dumps(data, indent=2)
