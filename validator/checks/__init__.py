"""
validator.checks
----------------

Exposes all validation stages by importing from:

- `rows`: Per-row checks for clients, workers and tasks.
- `dataset`: Schema, duplicate-id, phase-capacity and skill-coverage checks.
- `rules`: Co-run cycle detection and slot-restriction references.

Allows unified access to all checks via wildcard imports.
"""
from .rows import *
from .dataset import *
from .rules import *
