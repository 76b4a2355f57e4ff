fix_apply_description = """
Apply a list of field edits and validate again.

Each entry of `fixes` must look like `{"entity": "tasks", "rowIndex": 1, "field": "priority", "newValue": 3}`.

Entries are checked one at a time: an unknown entity, a row index outside the dataset, an empty field name or a missing `newValue` makes that entry skipped (listed in `skipped` with a reason) while the other entries are still applied in order. A `fixes` value that is not a list applies nothing.
"""

fix_suggest_description = """
Ask the external fix-suggestion service for edits.

The datasets and the open findings (the request's `diagnostics`, or a fresh validation run when omitted) are sent to the service configured by `FIX_SERVICE_URL`. The proposals are returned as-is and are **not** applied; send them to `/api/fix/apply` to apply them.

Returns 503 when no service is configured and 502 when the service fails or answers with something that is not a fixes document.
"""
