"""
Stage gating for the three analysis steps.

Everything here is derived from the current canonical result; nothing is
stored. The session keeps only the selected stage name and asks these
functions whether it is still allowed after every change.

  - lexical   : selectable as soon as any result exists
  - syntactic : selectable iff the lexical stage reported no errors
  - semantic  : selectable iff syntactic is selectable and reported no errors
"""

from typing import Dict, List, Optional

from config import (
    STAGE_ALIASES,
    STAGE_BUTTON_IDS,
    STAGE_BUTTON_LABELS,
    STAGE_LEXICAL,
    STAGES,
)


def resolve_stage(name) -> Optional[str]:
    """Maps a stage name or legacy step id ('lex', 'syn', 'sem') to a stage."""
    if not isinstance(name, str):
        return None
    key = name.strip().lower()
    if key in STAGES:
        return key
    return STAGE_ALIASES.get(key)


def _errors_for(result: dict, stage: str) -> list:
    return (result.get("stage_errors") or {}).get(stage) or []


def selectable_stages(result: Optional[dict]) -> List[str]:
    """Returns the stages the user may open, in pipeline order."""
    if result is None:
        return []

    stages = [STAGES[0]]
    for previous, stage in zip(STAGES, STAGES[1:]):
        # A stage with errors blocks everything downstream of it
        if _errors_for(result, previous):
            break
        stages.append(stage)
    return stages


def is_selectable(result: Optional[dict], stage) -> bool:
    resolved = resolve_stage(stage)
    return resolved is not None and resolved in selectable_stages(result)


def reconcile_selection(result: Optional[dict], current: Optional[str]) -> Optional[str]:
    """
    Re-validates a selection against a (possibly new) result.
    No result clears the selection; a selection that is no longer
    allowed falls back to the lexical stage.
    """
    if result is None:
        return None
    if current is None:
        return None
    if is_selectable(result, current):
        return resolve_stage(current)
    return STAGE_LEXICAL


def select_stage(result: Optional[dict], current: Optional[str], requested) -> Optional[str]:
    """Returns the new selection; a rejected request leaves `current` in place."""
    stage = resolve_stage(requested)
    if stage is not None and stage in selectable_stages(result):
        return stage
    return reconcile_selection(result, current)


def stage_controls(result: Optional[dict], current: Optional[str]) -> List[Dict]:
    """Presentation model for the three stage selector buttons."""
    allowed = selectable_stages(result)
    active = reconcile_selection(result, current)
    return [
        {
            "stage": stage,
            "id": STAGE_BUTTON_IDS[stage],
            "label": STAGE_BUTTON_LABELS[stage],
            "enabled": stage in allowed,
            "active": stage == active,
        }
        for stage in STAGES
    ]
