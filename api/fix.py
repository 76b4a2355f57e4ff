from fastapi import APIRouter, HTTPException
import os
import traceback
from api.validate import request_to_sheets
from core.state import Diagnostic
from docs.fix.suggestions import fix_apply_description, fix_suggest_description
from exceptions.custom_errors import *
from schemas.fix.suggestions import FixApplyRequest, FixApplyResponse, FixSuggestRequest
from utils.constants import FIX_SERVICE_TIMEOUT
from utils.helpers.fix_suggestions import request_fix_suggestions
from validator.builder import validate_all_data
from validator.mutation import apply_fixes

router = APIRouter(prefix="/fix", tags=["Fixes"])


# apply proposed fixes
@router.post(
    "/apply",
    response_model=FixApplyResponse,
    description=fix_apply_description,
    summary="Apply Fixes",
)
def apply_fix_proposals(request: FixApplyRequest):
    try:
        sheets = request_to_sheets(request)
        outcome = apply_fixes(sheets, request.fixes)
        result = validate_all_data(outcome.sheets, request.rules)

        return {
            "clients": outcome.sheets.clients.rows,
            "workers": outcome.sheets.workers.rows,
            "tasks": outcome.sheets.tasks.rows,
            "applied": outcome.applied,
            "skipped": outcome.skipped,
            "diagnostics": [d.to_dict() for d in result.diagnostics],
            "progress": result.progress,
        }

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# ask the external service for fixes
@router.post(
    "/suggest",
    description=fix_suggest_description,
    summary="Suggest Fixes",
)
def suggest_fixes(request: FixSuggestRequest):
    url = os.getenv("FIX_SERVICE_URL")
    if not url:
        raise HTTPException(status_code=503, detail="FIX_SERVICE_URL is not configured.")

    try:
        sheets = request_to_sheets(request)
        if request.diagnostics is None:
            diagnostics = validate_all_data(sheets, request.rules).diagnostics
        else:
            diagnostics = [
                Diagnostic(
                    d.entity, d.rowIndex, d.field, d.message, d.level, d.category, d.fixed
                )
                for d in request.diagnostics
            ]

        if not any(not d.fixed for d in diagnostics):
            return {"fixes": [], "detail": "No errors to fix."}

        fixes = request_fix_suggestions(
            sheets,
            diagnostics,
            url,
            api_key=os.getenv("FIX_SERVICE_API_KEY"),
            timeout=float(os.getenv("FIX_SERVICE_TIMEOUT", FIX_SERVICE_TIMEOUT)),
        )
        return {"fixes": fixes}

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
