from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from io import BytesIO
from typing import Literal, Optional
import traceback
from api.validate import request_to_sheets
from docs.files.sheets import files_export_description, files_upload_description
from exceptions.custom_errors import *
from schemas.validation.datasets import Datasets
from utils.loader import detect_entity_type, load_sheet, load_workbook, sheet_to_frame
from utils.logger import logger

router = APIRouter(prefix="/files", tags=["Files"])

MEDIA_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
}


def sheet_payload(sheet) -> dict:
    return {"headers": sheet.headers, "rows": sheet.rows}


# upload one dataset file or a workbook
@router.post(
    "/upload",
    description=files_upload_description,
    summary="Upload Dataset File",
)
def upload_file(
    file: UploadFile = File(...),
    entity: Optional[Literal["clients", "workers", "tasks"]] = Query(None),
):
    try:
        filename = file.filename or ""
        target = entity or detect_entity_type(filename)
        logger.info("📥 Upload %r as %s", filename, target or "workbook")

        if target is None:
            if filename.lower().endswith(".csv"):
                raise FileContentError(
                    f"Cannot tell which dataset {filename!r} holds; pass entity=clients, workers or tasks."
                )
            sheets = load_workbook(file.file, filename=filename)
            return {"datasets": {name: sheet_payload(sheet) for name, sheet in sheets.items() if sheet.rows}}

        sheet = load_sheet(file.file, entity=target, filename=filename)
        return {"datasets": {target: sheet_payload(sheet)}}

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# download one dataset as xlsx or csv
@router.post(
    "/export",
    description=files_export_description,
    summary="Export Dataset",
)
def export_file(
    request: Datasets,
    entity: Literal["clients", "workers", "tasks"] = Query(...),
    file_format: Literal["xlsx", "csv"] = Query("xlsx", alias="format"),
):
    df = sheet_to_frame(request_to_sheets(request)[entity])
    buffer = BytesIO()
    if file_format == "csv":
        df.to_csv(buffer, index=False)
    else:
        df.to_excel(buffer, index=False, sheet_name=entity.capitalize(), engine="openpyxl")
    buffer.seek(0)

    return StreamingResponse(
        buffer,
        media_type=MEDIA_TYPES[file_format],
        headers={"Content-Disposition": f'attachment; filename="{entity}.{file_format}"'},
    )
