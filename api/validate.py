from fastapi import APIRouter, HTTPException
import traceback
from core.state import Sheet, Sheets
from docs.validation.run import validation_run_description, validation_edit_description
from exceptions.custom_errors import *
from schemas.validation.datasets import (
    Datasets,
    EditRequest,
    EditResponse,
    ValidateRequest,
    ValidateResponse,
)
from validator.builder import summarize_diagnostics, validate_all_data
from validator.mutation import set_field

router = APIRouter(prefix="/validation", tags=["Validation"])


def request_to_sheets(data: Datasets) -> Sheets:
    """Build a snapshot from a request body, using explicit headers when sent."""
    headers = data.headers or {}
    return Sheets(
        clients=Sheet(list(data.clients), headers.get("clients")),
        workers=Sheet(list(data.workers), headers.get("workers")),
        tasks=Sheet(list(data.tasks), headers.get("tasks")),
    )


def build_response(result) -> dict:
    return {
        "diagnostics": [d.to_dict() for d in result.diagnostics],
        "progress": result.progress,
        "summary": summarize_diagnostics(result.diagnostics),
    }


# run validation
@router.post(
    "/run",
    response_model=ValidateResponse,
    description=validation_run_description,
    summary="Validate Datasets",
)
def run_validation(request: ValidateRequest):
    try:
        sheets = request_to_sheets(request)
        result = validate_all_data(sheets, request.rules)
        return build_response(result)

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# edit one cell and re-validate
@router.post(
    "/edit",
    response_model=EditResponse,
    description=validation_edit_description,
    summary="Edit Cell",
)
def edit_cell(request: EditRequest):
    try:
        sheets = request_to_sheets(request)
        edit = request.edit
        edited = set_field(sheets, edit.entity, edit.rowIndex, edit.field, edit.newValue)
        result = validate_all_data(edited, request.rules)

        response = build_response(result)
        response.update(
            clients=edited.clients.rows,
            workers=edited.workers.rows,
            tasks=edited.tasks.rows,
        )
        return response

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")
