"""HTML builders for the result panels. Pure: every function returns a string."""

import html
from typing import Optional

from config import (
    CATEGORY_HEADER,
    MSG_SUCCESS,
    NO_TOKENS_TEXT,
    STAGE_ERROR_HEADERS,
    STAGE_SEMANTIC,
    STAT_CARD_KEYS,
    STAT_LABELS,
    TOKENS_HEADER,
)
from errors import AnalyzerError, ServiceError, ValidationError
from normalizer import group_tokens_by_type
from tables import CATEGORY_COLUMNS, ERROR_COLUMNS, TOKEN_COLUMNS, render_table


def render_stats_cards(stats: dict) -> str:
    """The stat cards grid, in fixed order; absent counts show as 0."""
    cards = []
    for key in STAT_CARD_KEYS:
        cards.append(
            f'<div class="stat-card"><h3>{int(stats.get(key, 0))}</h3>'
            f'<p>{STAT_LABELS[key]}</p></div>'
        )
    return f'<div class="stats-grid">{"".join(cards)}</div>'


def render_errors_panel(result: Optional[dict], stage: Optional[str]) -> str:
    """
    Errors of the selected stage, the success banner when the semantic
    stage is open and clean, or nothing at all.
    """
    if result is None or stage is None:
        return ""

    errors = result["stage_errors"].get(stage) or []
    if errors:
        return (
            '<div class="error-section">'
            f'<div class="error-header">{STAGE_ERROR_HEADERS[stage]}</div>'
            f'<div class="table-container">{render_table(errors, ERROR_COLUMNS)}</div>'
            '</div>'
        )

    if stage == STAGE_SEMANTIC:
        return f'<div class="success-message">{MSG_SUCCESS}</div>'
    return ""


def render_tokens_panel(result: Optional[dict]) -> str:
    if result is None:
        return ""
    table = render_table(result["tokens"], TOKEN_COLUMNS, empty_text=NO_TOKENS_TEXT)
    return (
        f'<div class="result-header">{TOKENS_HEADER}</div>'
        f'<div class="table-container">{table}</div>'
    )


def render_category_panel(result: Optional[dict]) -> str:
    """Token counts per category tag, in order of first appearance."""
    if result is None:
        return ""
    rows = [
        {"category": category, "count": len(members)}
        for category, members in group_tokens_by_type(result["tokens"]).items()
    ]
    table = render_table(rows, CATEGORY_COLUMNS, empty_text=NO_TOKENS_TEXT)
    return (
        f'<div class="result-header">{CATEGORY_HEADER}</div>'
        f'<div class="table-container">{table}</div>'
    )


def render_notice(error: Optional[AnalyzerError]) -> str:
    # Validation problems are inline hints; service/schema failures get a dismiss button
    if error is None:
        return ""
    text = html.escape(error.notice or str(error))
    if isinstance(error, ValidationError):
        return f'<div class="notice notice-inline">{text}</div>'
    detail = ""
    if isinstance(error, ServiceError) and error.reason:
        detail = f'<span class="notice-detail">{html.escape(error.reason)}</span>'
    return (
        '<div class="notice notice-error" role="alert">'
        f'<span>{text}</span>{detail}'
        '<button id="notice-dismiss" class="notice-dismiss" aria-label="Cerrar">&times;</button>'
        '</div>'
    )
