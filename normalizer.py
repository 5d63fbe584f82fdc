"""
Result normalization.

The analysis service has been consumed by two front-ends that expect
different payload layouts. The shape is resolved exactly once, here, and
everything downstream only ever sees the canonical dict:

    {
        "stats":        {category: int},
        "tokens":       [{"type", "value", "line"}],
        "stage_errors": {stage: [{"line", "message"}]},
        "stage_status": {stage: {"valid", "message"}},
    }
"""

from typing import Any, Dict, List, Optional

from config import (
    ANALYZER_DEBUG,
    CATEGORY_TOKEN_TYPES,
    ERRORS_CATEGORY,
    MSG_STAGE_BLOCKED,
    MSG_STAGE_INVALID,
    MSG_STAGE_VALID,
    STAGE_BUTTON_LABELS,
    STAGE_LEXICAL,
    STAGE_PREFIXES,
    STAGES,
    STAT_KEYS,
)
from errors import SchemaError
from stage_gate import resolve_stage

# ===============================================
# PAYLOAD SHAPES
# ===============================================

PAYLOAD_CANONICAL = "canonical"
PAYLOAD_FLAT = "flat"          # tokens + stats + lex_errors/syn_errors/sem_errors
PAYLOAD_GROUPED = "grouped"    # {category: {"count", "tokens"}} + "errors" pseudo-category

CANONICAL_FIELDS = ("stats", "tokens", "stage_errors", "stage_status")
FLAT_REQUIRED_FIELDS = ("stats", "tokens")

# Equivalent field names seen across both payload generations
TOKEN_TYPE_FIELDS = ("type", "tipo")
TOKEN_VALUE_FIELDS = ("value", "valor")
LINE_FIELDS = ("line", "linea", "línea", "Línea")
MESSAGE_FIELDS = ("message", "error", "mensaje", "Error")
ERROR_STAGE_FIELDS = ("stage", "type")

# ===============================================
# FIELD HELPERS
# ===============================================

def _pick(record, fields, default=None):
    """Returns the first non-None value found under any of `fields`."""
    if not isinstance(record, dict):
        return default
    for name in fields:
        value = record.get(name)
        if value is not None:
            return value
    return default


def _to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _normalize_token(raw, type_tag: str = "") -> Dict[str, Any]:
    # Grouped payloads sometimes list bare values instead of records
    if isinstance(raw, str):
        return {"type": type_tag, "value": raw, "line": 0}
    return {
        "type": str(_pick(raw, TOKEN_TYPE_FIELDS, type_tag)),
        "value": str(_pick(raw, TOKEN_VALUE_FIELDS, "")),
        "line": max(_to_int(_pick(raw, LINE_FIELDS), 0), 0),
    }


def _normalize_error(raw) -> Dict[str, Any]:
    if isinstance(raw, str):
        return {"line": None, "message": raw}
    line = _to_int(_pick(raw, LINE_FIELDS), None)
    return {
        "line": line if line is None or line >= 0 else None,
        "message": str(_pick(raw, MESSAGE_FIELDS, "")),
    }


def _normalize_errors(raw) -> List[Dict[str, Any]]:
    """An absent (or unusable) error list is an empty one."""
    if not isinstance(raw, list):
        return []
    return [_normalize_error(entry) for entry in raw]


def _group_members(group) -> list:
    if isinstance(group, list):
        return group
    if isinstance(group, dict) and isinstance(group.get("tokens"), list):
        return group["tokens"]
    return []


def _build_stats(counts, tokens: list) -> Dict[str, int]:
    """
    Missing categories count as zero. The total always comes from the token
    list, so a reported total that disagrees with it is ignored.
    """
    counts = counts if isinstance(counts, dict) else {}
    stats = {key: _to_int(counts.get(key), 0) for key in STAT_KEYS}
    if ANALYZER_DEBUG and _to_int(counts.get("total_tokens"), None) not in (None, len(tokens)):
        print(f"LOG: Reported total_tokens {counts.get('total_tokens')} != {len(tokens)} tokens")
    stats["total_tokens"] = len(tokens)
    return stats


def _stage_message(stage: str, errors: list, upstream_valid: bool, valid: bool) -> str:
    label = STAGE_BUTTON_LABELS[stage]
    if errors:
        return MSG_STAGE_INVALID.format(label=label, count=len(errors))
    if not upstream_valid:
        return MSG_STAGE_BLOCKED.format(label=label)
    if not valid:
        return MSG_STAGE_INVALID.format(label=label, count=0)
    return MSG_STAGE_VALID.format(label=label)


def _build_stage_status(stage_errors: dict, flags: dict, messages: dict = None) -> Dict[str, dict]:
    """
    Validity cascades down the pipeline: a stage is valid only if it has no
    errors, the payload does not flag it invalid, and every earlier stage is
    valid. `messages` (canonical input) wins over generated text.
    """
    status = {}
    upstream_valid = True
    for stage in STAGES:
        errors = stage_errors[stage]
        flag = flags.get(stage)
        valid = upstream_valid and not errors and (flag is None or bool(flag))

        if messages is not None:
            message = messages.get(stage)
            message = message if isinstance(message, str) else None
        else:
            message = _stage_message(stage, errors, upstream_valid, valid)

        status[stage] = {"valid": valid, "message": message}
        upstream_valid = valid
    return status


def _assemble(stats, tokens, stage_errors, stage_status) -> Dict[str, Any]:
    return {
        "stats": stats,
        "tokens": tokens,
        "stage_errors": stage_errors,
        "stage_status": stage_status,
    }

# ===============================================
# SHAPE DETECTION
# ===============================================

def _require(payload: dict, fields, kinds) -> None:
    for name, kind in zip(fields, kinds):
        if not isinstance(payload.get(name), kind):
            raise SchemaError(name)


def detect_payload_shape(payload) -> str:
    """
    Tags a raw payload with its shape.
    Raises SchemaError naming the first missing required field when the
    payload matches none of the known shapes.
    """
    if not isinstance(payload, dict):
        raise SchemaError("payload")

    if "stage_errors" in payload or "stage_status" in payload:
        _require(payload, CANONICAL_FIELDS, (dict, list, dict, dict))
        return PAYLOAD_CANONICAL

    flat_markers = ["tokens", "stats"]
    flat_markers += [f"{prefix}_errors" for prefix in STAGE_PREFIXES.values()]
    if any(name in payload for name in flat_markers):
        # The service serializes an empty token slice as null
        _require(payload, FLAT_REQUIRED_FIELDS, (dict, (list, type(None))))
        if "tokens" not in payload:
            raise SchemaError("tokens")
        return PAYLOAD_FLAT

    if any(isinstance(payload.get(category), dict) for category in CATEGORY_TOKEN_TYPES):
        return PAYLOAD_GROUPED
    # A source made only of invalid characters groups nothing but errors
    if isinstance(payload.get(ERRORS_CATEGORY), (dict, list)):
        return PAYLOAD_GROUPED

    raise SchemaError(FLAT_REQUIRED_FIELDS[0])

# ===============================================
# SHAPE HANDLERS
# ===============================================

def _normalize_flat(payload: dict) -> Dict[str, Any]:
    tokens = [_normalize_token(raw) for raw in payload["tokens"] or []]
    stage_errors = {
        stage: _normalize_errors(payload.get(f"{prefix}_errors"))
        for stage, prefix in STAGE_PREFIXES.items()
    }
    flags = {
        stage: payload.get(f"is_{prefix}_valid")
        for stage, prefix in STAGE_PREFIXES.items()
    }
    return _assemble(
        _build_stats(payload["stats"], tokens),
        tokens,
        stage_errors,
        _build_stage_status(stage_errors, flags),
    )


def _normalize_grouped(payload: dict) -> Dict[str, Any]:
    counts = {}
    tokens = []
    for category, type_tag in CATEGORY_TOKEN_TYPES.items():
        group = payload.get(category)
        if not isinstance(group, dict):
            continue
        members = [_normalize_token(raw, type_tag) for raw in _group_members(group)]
        tokens.extend(members)
        counts[category] = group.get("count", len(members))

    # Source order is lost by grouping; a stable sort on line restores it per line
    tokens.sort(key=lambda tok: tok["line"])

    total = payload.get("total_tokens")
    if isinstance(total, dict):
        total = total.get("count")
    if total is not None:
        counts["total_tokens"] = total

    stage_errors = {stage: [] for stage in STAGES}
    for raw in _group_members(payload.get(ERRORS_CATEGORY)):
        stage = resolve_stage(_pick(raw, ERROR_STAGE_FIELDS)) or STAGE_LEXICAL
        stage_errors[stage].append(_normalize_error(raw))

    return _assemble(
        _build_stats(counts, tokens),
        tokens,
        stage_errors,
        _build_stage_status(stage_errors, {}),
    )


def _normalize_canonical(payload: dict) -> Dict[str, Any]:
    tokens = [_normalize_token(raw) for raw in payload["tokens"]]
    stage_errors = {
        stage: _normalize_errors(payload["stage_errors"].get(stage))
        for stage in STAGES
    }
    flags = {}
    messages = {}
    for stage in STAGES:
        entry = payload["stage_status"].get(stage)
        if isinstance(entry, dict):
            flags[stage] = entry.get("valid")
            messages[stage] = entry.get("message")
    return _assemble(
        _build_stats(payload["stats"], tokens),
        tokens,
        stage_errors,
        _build_stage_status(stage_errors, flags, messages),
    )


NORMALIZERS = {
    PAYLOAD_CANONICAL: _normalize_canonical,
    PAYLOAD_FLAT: _normalize_flat,
    PAYLOAD_GROUPED: _normalize_grouped,
}


def normalize_result(payload) -> Dict[str, Any]:
    """
    Converts a raw service payload (either known shape) into the canonical
    result. Pure: the payload is never mutated, and normalizing a canonical
    result returns an equal value.
    """
    shape = detect_payload_shape(payload)
    result = NORMALIZERS[shape](payload)
    if ANALYZER_DEBUG:
        print(f"[Normalizer] shape={shape} tokens={len(result['tokens'])} errors={count_errors(result)}")
    return result

# ===============================================
# RESULT QUERIES
# ===============================================

def count_errors(result: dict, stage: str = None) -> int:
    """Error count for one stage, or across all stages."""
    stage_errors = result.get("stage_errors") or {}
    if stage is not None:
        return len(stage_errors.get(stage) or [])
    return sum(len(stage_errors.get(s) or []) for s in STAGES)


def first_failing_stage(result: dict) -> Optional[str]:
    for stage in STAGES:
        if count_errors(result, stage):
            return stage
    return None


def group_tokens_by_type(tokens: list) -> Dict[str, list]:
    """Per-category token groups, keyed in order of first appearance."""
    groups = {}
    for tok in tokens:
        groups.setdefault(tok.get("type", ""), []).append(tok)
    return groups
