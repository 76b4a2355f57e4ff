rules_export_description = """
Build the rules document for download.

Only active rules are exported and their ids are stripped. The document has the shape:

```json
{"version": "1.0", "timestamp": "2026-01-01T00:00:00+00:00", "rules": [{"type": "coRun", "tasks": ["T1", "T2"], "active": true}]}
```
"""

rules_import_description = """
Read rules back from an exported document. Each rule gets a new id.

Returns 400 if the document is malformed or holds an unknown rule type.
"""
