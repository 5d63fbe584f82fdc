"""
Column-driven table rendering.

A table is an ordered list of records (dicts) and an ordered list of
ColumnSpec. Each column resolves one cell per record, either by computing
it from the row position or by walking its accessor chain until a field
is present. Cell text is always HTML-escaped: token values and error
messages come straight from user code.
"""

import html
import re
from typing import Callable, List, Optional

CELL_TEXT = "text"
CELL_CODE = "code"
CELL_BADGE = "badge"

_CSS_UNSAFE = re.compile(r"[^a-z0-9_-]+")


class ColumnSpec:
    """Describes how one displayed column derives its value from a record."""

    def __init__(
        self,
        header: str,
        accessors: Optional[List[str]] = None,
        compute: Optional[Callable] = None,
        cell: str = CELL_TEXT,
    ):
        if not accessors and compute is None:
            raise ValueError(f"Column '{header}' needs accessors or a compute rule")
        self.header = header
        self.accessors = tuple(accessors or ())
        self.compute = compute
        self.cell = cell

    def resolve(self, record, index: int):
        """Raw (unescaped) value of this column for the record at `index`."""
        if self.compute is not None:
            return self.compute(record, index)
        for name in self.accessors:
            value = _lookup(record, name)
            if value is not None:
                return value
        return ""

    def __repr__(self):
        return f"ColumnSpec({self.header!r}, accessors={list(self.accessors)!r}, cell={self.cell!r})"


def _lookup(record, name: str):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def field_column(header: str, name: str, cell: str = CELL_TEXT) -> ColumnSpec:
    return ColumnSpec(header, accessors=[name], cell=cell)


def fallback_column(header: str, *names: str, cell: str = CELL_TEXT) -> ColumnSpec:
    """Tries each field in order; empty string when none is present."""
    return ColumnSpec(header, accessors=list(names), cell=cell)


def index_column(header: str = "#") -> ColumnSpec:
    """1-based row number, independent of record content."""
    return ColumnSpec(header, compute=lambda record, index: index + 1)

# ===============================================
# CELL FORMATTING
# ===============================================

def _escape(value) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def _css_token(value) -> str:
    return _CSS_UNSAFE.sub("-", str(value).lower()).strip("-")


def _format_cell(column: ColumnSpec, value) -> str:
    text = _escape(value)
    if column.cell == CELL_CODE:
        return f"<code>{text}</code>"
    if column.cell == CELL_BADGE:
        return f'<span class="token-type token-{_css_token(value)}">{text}</span>'
    return text

# ===============================================
# RENDERING
# ===============================================

def build_rows(records, columns: List[ColumnSpec]) -> List[List[str]]:
    """Row-per-record, column-per-spec grid of escaped cell HTML."""
    return [
        [_format_cell(column, column.resolve(record, index)) for column in columns]
        for index, record in enumerate(records)
    ]


def render_table(records, columns: List[ColumnSpec], empty_text: str = None) -> str:
    """
    Renders a full <table>. An empty record list yields a header-only table,
    plus a placeholder row when `empty_text` is given.
    """
    head = "".join(f"<th>{_escape(column.header)}</th>" for column in columns)
    body = [
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>"
        for row in build_rows(records, columns)
    ]
    if not body and empty_text:
        body.append(
            f"<tr><td colspan='{max(len(columns), 1)}' class='placeholder-text'>{_escape(empty_text)}</td></tr>"
        )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{''.join(body)}</tbody></table>"

# ===============================================
# COLUMN PRESETS
# ===============================================

TOKEN_COLUMNS = [
    index_column("#"),
    fallback_column("Tipo", "type", "tipo", cell=CELL_BADGE),
    fallback_column("Valor", "value", "valor", cell=CELL_CODE),
    fallback_column("Línea", "line", "Línea", "línea", "linea"),
]

ERROR_COLUMNS = [
    fallback_column("Línea", "line", "Línea", "línea", "linea"),
    fallback_column("Error", "message", "Error", "error", "mensaje"),
]

CATEGORY_COLUMNS = [
    field_column("Categoría", "category", cell=CELL_BADGE),
    field_column("Cantidad", "count"),
]
