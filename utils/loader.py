import pandas as pd
from typing import Dict, IO, Iterable, Optional, Union
from pathlib import Path
from core.state import Sheet, Sheets
from exceptions.custom_errors import FileContentError, FileReadingError, UnknownEntityError
from utils.constants import ENTITY_TYPES


def detect_entity_type(filename: str, sheet_names: Iterable[str] = ()) -> Optional[str]:
    """
    Guess which dataset a file holds from its name, then from its sheet names.

    Returns:
        Optional[str]: 'clients', 'workers', 'tasks', or None if nothing matches.
    """
    normalized = str(filename).lower()
    for keyword, entity in (("client", "clients"), ("worker", "workers"), ("task", "tasks")):
        if keyword in normalized:
            return entity
    joined = "|".join(sheet_names).lower()
    for keyword, entity in (("client", "clients"), ("worker", "workers"), ("task", "tasks")):
        if keyword in joined:
            return entity
    return None


def frame_to_sheet(df: pd.DataFrame) -> Sheet:
    """Convert a DataFrame into a Sheet, turning NaN cells into None."""
    df = df.astype(object).where(pd.notna(df), None)
    headers = [str(c) for c in df.columns]
    df.columns = headers
    return Sheet(rows=df.to_dict(orient="records"), headers=headers)


def sheet_to_frame(sheet: Sheet) -> pd.DataFrame:
    """Export a Sheet back to a DataFrame, keeping the original column order."""
    df = pd.DataFrame(sheet.rows)
    ordered = [h for h in sheet.headers if h in df.columns]
    extra = [c for c in df.columns if c not in ordered]
    return df[ordered + extra] if len(df.columns) else df


def _read_frame(path_or_buffer, filename: str, sheet_name=0) -> Union[pd.DataFrame, Dict[str, pd.DataFrame]]:
    try:
        if filename.lower().endswith(".csv"):
            return pd.read_csv(path_or_buffer)
        return pd.read_excel(path_or_buffer, sheet_name=sheet_name)
    except Exception as e:
        raise FileReadingError(f"Error loading {filename}: {e}")


def load_sheet(
    path_or_buffer: Union[str, Path, bytes, IO],
    entity: Optional[str] = None,
    filename: Optional[str] = None,
) -> Sheet:
    """
    Load one dataset from a .csv or .xlsx file.

    Parameters:
        path_or_buffer: Path to the file, or a file-like object (e.g. an upload).
        entity: Expected dataset. When given, the file name must point at the
                same dataset or at none.
        filename: Name used for type detection when reading from a buffer.

    Returns:
        Sheet: Rows of the first worksheet (or of the CSV), headers in file order.
    """
    filename = filename or (str(path_or_buffer) if isinstance(path_or_buffer, (str, Path)) else "")
    if not filename.lower().endswith((".csv", ".xlsx", ".xls")):
        raise FileContentError(f"Unsupported file type {filename!r}; please upload a .xlsx or .csv file.")

    if entity is not None:
        if entity not in ENTITY_TYPES:
            raise UnknownEntityError(f"Unknown dataset {entity!r}.")
        detected = detect_entity_type(Path(filename).name)
        if detected is not None and detected != entity:
            raise FileContentError(f"File seems to contain {detected} data, not {entity}.")

    df = _read_frame(path_or_buffer, filename)
    return frame_to_sheet(df)


def load_workbook(path_or_buffer: Union[str, Path, bytes, IO], filename: Optional[str] = None) -> Sheets:
    """
    Load all three datasets from one workbook with a sheet per entity.

    Sheets are matched to datasets by name ("Clients", "worker list", ...);
    unrecognised sheets are ignored.
    """
    filename = filename or (str(path_or_buffer) if isinstance(path_or_buffer, (str, Path)) else "book.xlsx")
    if not filename.lower().endswith((".xlsx", ".xls")):
        raise FileContentError(f"Unsupported workbook type {filename!r}; please upload a .xlsx file.")
    frames = _read_frame(path_or_buffer, filename, sheet_name=None)
    if isinstance(frames, pd.DataFrame):
        raise FileContentError("A workbook with clients, workers and tasks sheets is required.")

    sheets = Sheets()
    found = set()
    for name, df in frames.items():
        entity = detect_entity_type("", [str(name)])
        if entity is None or entity in found:
            continue
        found.add(entity)
        setattr(sheets, entity, frame_to_sheet(df))

    if not found:
        raise FileContentError(
            f"No clients, workers or tasks sheets found. Sheets present: {', '.join(map(str, frames))}."
        )
    return sheets
