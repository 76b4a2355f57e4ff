files_upload_description = """
Read an uploaded `.csv` or `.xlsx` file into dataset records.

### Query Parameters

- `entity`: Optional `clients`, `workers` or `tasks`. When omitted the dataset is guessed from the file name
  (e.g. `worker_list.csv`). An Excel workbook whose name points at no dataset is read sheet by sheet,
  matching sheet names such as `Clients`, `Workers` and `Tasks`.

### Response

```json
{"datasets": {"clients": {"headers": ["id", "priorityLevel"], "rows": [{"id": "C1", "priorityLevel": 3}]}}}
```

Empty cells come back as `null`. Returns 400 if the file type is unsupported or the file name names a
different dataset than `entity`, and 500 if the file cannot be parsed.
"""

files_export_description = """
Download one dataset as a spreadsheet.

The body has the same shape as `/api/validation/run`; only the dataset named by `entity` is written,
in its original column order (or the order given in `headers`).

### Query Parameters

- `entity`: `clients`, `workers` or `tasks`
- `format`: `xlsx` (default) or `csv`
"""
