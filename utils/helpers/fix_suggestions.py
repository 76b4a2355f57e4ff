import json
import re
import requests
from typing import Any, Dict, List, Optional, Sequence
from core.state import Diagnostic, Sheets
from exceptions.custom_errors import FixResponseError, FixServiceError
from utils.constants import FIX_SERVICE_TIMEOUT
from utils.logger import logger

_JSON_BLOCK = re.compile(r"```(?:json)?\s*\n([\s\S]*?)\n?```")

FIX_PROMPT = """You are an AI assistant that helps fix data validation errors. Your task is to analyze the provided data and validation errors, and then suggest fixes in a strict JSON format.

**IMPORTANT:** You MUST only respond with a single JSON object. Do NOT include any other text, explanations, or markdown outside of the JSON. The JSON should have a single key, "fixes", which is an array of fix objects. Each fix object MUST have "entity", "rowIndex", "field", and "newValue" properties.

Here is the current data state:
Clients: {clients}
Workers: {workers}
Tasks: {tasks}

Here are the validation errors that need fixing:
{errors}

Example of expected JSON response:
```json
{{
  "fixes": [
    {{"entity": "clients", "rowIndex": 0, "field": "requestedTasks", "newValue": "T1,T2"}},
    {{"entity": "tasks", "rowIndex": 1, "field": "priority", "newValue": 3}}
  ]
}}
```

Now, provide the JSON response with suggested fixes for the given errors."""


def build_fix_prompt(sheets: Sheets, diagnostics: Sequence[Diagnostic]) -> str:
    """Prompt holding every dataset and the findings not yet marked fixed."""
    open_items = [d.to_dict() for d in diagnostics if not d.fixed]
    return FIX_PROMPT.format(
        clients=json.dumps(sheets.clients.rows, default=str),
        workers=json.dumps(sheets.workers.rows, default=str),
        tasks=json.dumps(sheets.tasks.rows, default=str),
        errors=json.dumps(open_items),
    )


def extract_json_block(text: str) -> str:
    """Return the body of a ```json fenced block if there is one, else the text itself."""
    match = _JSON_BLOCK.search(text)
    if match:
        return match.group(1)
    return text.strip()


def parse_fix_response(text: str) -> List[Any]:
    """
    Pull the list of proposals out of the model's answer.

    The entries themselves are not checked here; `validator.mutation.apply_fixes`
    validates each one before applying it.

    Raises:
        FixResponseError: If the answer holds no decodable JSON object with a
            "fixes" list.
    """
    try:
        payload = json.loads(extract_json_block(text))
    except ValueError as e:
        raise FixResponseError(f"Fix service returned invalid JSON: {e}")

    if not isinstance(payload, dict) or not isinstance(payload.get("fixes", []), list):
        raise FixResponseError("Fix service response has no 'fixes' list.")
    return payload.get("fixes", [])


def request_fix_suggestions(
    sheets: Sheets,
    diagnostics: Sequence[Diagnostic],
    url: str,
    api_key: Optional[str] = None,
    timeout: float = FIX_SERVICE_TIMEOUT,
) -> List[Any]:
    """
    Ask the external suggestion service for field edits.

    The service receives `{"text": prompt}` and answers with JSON whose
    "summary" (or "text") member holds the model output. Nothing is applied
    here; the caller passes the proposals on to the mutation interface.
    """
    headers: Dict[str, str] = {}
    if api_key:
        headers["x-api-key"] = api_key

    prompt = build_fix_prompt(sheets, diagnostics)
    logger.info("Requesting fix suggestions for %d open findings", sum(1 for d in diagnostics if not d.fixed))
    try:
        resp = requests.post(url, json={"text": prompt}, headers=headers, timeout=timeout)
        resp.raise_for_status()
        body = resp.json()
    except requests.RequestException as e:
        raise FixServiceError(f"Fix service request failed: {e}")
    except ValueError as e:
        raise FixServiceError(f"Fix service did not return JSON: {e}")

    if isinstance(body, dict) and isinstance(body.get("fixes"), list):
        return body["fixes"]

    text = body.get("summary") or body.get("text") if isinstance(body, dict) else None
    if not isinstance(text, str):
        logger.error("Unexpected fix service payload: %r", body)
        raise FixResponseError("Fix service response has no 'summary' text.")
    return parse_fix_response(text)
