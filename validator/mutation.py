from dataclasses import dataclass, field
from typing import Any, List

from pydantic import ValidationError

from core.state import Sheets
from exceptions.custom_errors import InvalidFixError, UnknownEntityError
from schemas.fix.suggestions import FixProposal, SkippedFix
from utils.constants import ENTITY_TYPES
from utils.logger import logger
from utils.normalize import resolve_field_key


def set_field(sheets: Sheets, entity: str, row_index: int, field_name: str, new_value: Any) -> Sheets:
    """
    Write one cell and return the edited copy of the snapshot.

    The value goes to the existing column whose normalized name matches
    `field_name`; when no column matches, a column literally named
    `field_name` is added to the row. The input snapshot is left untouched.

    Raises:
        UnknownEntityError: If `entity` is not clients, workers or tasks.
        InvalidFixError: If `row_index` is outside the sheet.
    """
    if entity not in ENTITY_TYPES:
        raise UnknownEntityError(f"Unknown dataset {entity!r}; expected one of {', '.join(ENTITY_TYPES)}.")
    if not isinstance(row_index, int) or isinstance(row_index, bool):
        raise InvalidFixError(f"Row index must be an integer, got {row_index!r}.")
    rows = sheets[entity].rows
    if not 0 <= row_index < len(rows):
        raise InvalidFixError(f"Row {row_index} does not exist in {entity} ({len(rows)} rows).")

    edited = sheets.copy()
    row = edited[entity].rows[row_index]
    key = resolve_field_key(row, field_name)
    row[key] = new_value
    if key not in edited[entity].headers:
        edited[entity].headers.append(key)
    return edited


@dataclass
class FixOutcome:
    """Result of applying a batch of fix proposals."""

    sheets: Sheets
    """Snapshot with every valid proposal applied."""
    applied: List[FixProposal] = field(default_factory=list)
    skipped: List[SkippedFix] = field(default_factory=list)


def apply_fixes(sheets: Sheets, proposals: Any) -> FixOutcome:
    """
    Apply externally proposed edits one by one.

    Each entry is checked on its own: entity must be a known dataset, rowIndex
    an integer inside that dataset, field a non-empty string, and newValue
    present. Entries failing any check are skipped with a reason and the rest
    are still applied, in order. Anything other than a list applies nothing.
    """
    outcome = FixOutcome(sheets=sheets)
    if not isinstance(proposals, list):
        if proposals is not None:
            outcome.skipped.append(
                SkippedFix(index=-1, proposal=None, reason="Fixes must be a list.")
            )
        return outcome

    for index, raw in enumerate(proposals):
        try:
            proposal = raw if isinstance(raw, FixProposal) else FixProposal.model_validate(raw)
        except ValidationError as e:
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'fix'}: {err['msg']}" for err in e.errors()
            )
            logger.warning("Skipping fix #%d: %s", index, reason)
            outcome.skipped.append(SkippedFix(index=index, proposal=raw, reason=reason))
            continue

        try:
            outcome.sheets = set_field(
                outcome.sheets, proposal.entity, proposal.rowIndex, proposal.field, proposal.newValue
            )
        except (InvalidFixError, UnknownEntityError) as e:
            logger.warning("Skipping fix #%d: %s", index, e)
            outcome.skipped.append(SkippedFix(index=index, proposal=raw, reason=str(e)))
            continue

        logger.info(
            "Applied fix #%d: %s row %d %s -> %r",
            index,
            proposal.entity,
            proposal.rowIndex,
            proposal.field,
            proposal.newValue,
        )
        outcome.applied.append(proposal)

    return outcome
