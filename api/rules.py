from fastapi import APIRouter, Body, HTTPException
from typing import Any, Dict
from core.rule_book import export_rules, import_rules
from docs.rules.rules import rules_export_description, rules_import_description
from exceptions.custom_errors import *
from schemas.rules.rules import RulesDocument, RulesExportRequest, RulesImportResponse

router = APIRouter(prefix="/rules", tags=["Rules"])


@router.post(
    "/export",
    response_model=RulesDocument,
    description=rules_export_description,
    summary="Export Rules",
)
def export_rules_config(request: RulesExportRequest):
    return export_rules(request.rules)


@router.post(
    "/import",
    response_model=RulesImportResponse,
    description=rules_import_description,
    summary="Import Rules",
)
def import_rules_config(document: Dict[str, Any] = Body(...)):
    try:
        return {"rules": import_rules(document)}
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
