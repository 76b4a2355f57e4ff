"""
core
---------

Core validation components:

- Sheet, Sheets & Diagnostic:
  The immutable-by-convention dataset snapshot and the findings produced from it.

- CheckManager:
  Register and apply validation stages in a controlled sequence, reporting progress.

- RuleBook:
  Hold the user's business rules and export/import them as a JSON document.
"""
