"""
validator
---------

Main validation module. Initializes key components:

- `builder`: Runs a full validation pass over a snapshot.
- `mutation`: Field edits and fix proposals applied to a snapshot.
- `session`: Holds the current snapshot, rules and diagnostics between edits.

Provides high-level access to core validation functionality.
"""
from . import builder, mutation, session
