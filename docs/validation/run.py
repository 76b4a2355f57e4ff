validation_run_description = """
Validate clients, workers and tasks together and return every finding.

### Request Body

- `clients`: List of client records. Column names are free-form; e.g. `priorityLevel`, `Priority Level` and `priority` are the same field.
    - `id` / `clientId`: Primary key of the client
    - `priorityLevel`: Priority from 1 to 5
    - `requestedTasks`: Task ids, as a list, a JSON array or comma separated text
    - `groupTag`: Client group used by slot restriction rules

- `workers`: List of worker records.
    - `id` / `workerId`: Primary key of the worker
    - `availableSlots`: Phases the worker can work, as numbers
    - `maxLoadPerPhase`: Maximum load per phase, at most the number of slots
    - `skills`: Skills of the worker
    - `workerGroup` / `groupTag`: Worker group used by slot restriction rules

- `tasks`: List of task records.
    - `id` / `taskId`: Primary key of the task
    - `duration`: Duration in phases, at least 1
    - `requiredSkills`: Skills needed to run the task
    - `preferredPhases`: `"1-3"`, `"1,2,3"` or `"[1,2,3]"`
    - `phase`: Single phase used for capacity accounting
    - `maxConcurrent`: Parallel runs, limited by qualified workers with slots
    - `dependencies` / `dependsOn`: Task ids this task depends on

- `rules`: Optional list of business rules, each with a `type` of `coRun`, `slotRestriction`, `loadLimit`, `phaseWindow`, `patternMatch` or `precedenceOverride`.

- `headers`: Optional `{entity: [column names]}` as found in the source files. Defaults to the keys of each dataset's first row.

### Response

- `diagnostics`: Every finding with `id`, `entity`, `rowIndex` (-1 for dataset and rule findings), `field`, `message`, `level` and `category`. Ids are stable across runs over unchanged data.
- `progress`: 100 once the run completed.
- `summary`: Counts by level and by entity.
"""

validation_edit_description = """
Edit one cell and validate again.

The `edit` object names the `entity`, the 0-based `rowIndex`, the `field` and the `newValue`. The field is matched against the row's columns ignoring case, spaces and punctuation; when nothing matches, a new column with that name is added.

The response holds the edited datasets and the findings of a full new run.
"""
