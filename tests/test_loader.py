import pandas as pd
import pytest

from exceptions.custom_errors import FileContentError, FileReadingError, UnknownEntityError
from utils.loader import detect_entity_type, load_sheet, load_workbook, sheet_to_frame
from validator.builder import validate_all_data


@pytest.fixture
def clients_csv(tmp_path):
    path = tmp_path / "clients.csv"
    path.write_text('id,Priority Level,requestedTasks\nC1,3,"T1,T2"\nC2,,T3\n', encoding="utf-8")
    return path


def test_detect_entity_type():
    assert detect_entity_type("My_Workers.xlsx") == "workers"
    assert detect_entity_type("CLIENTS.csv") == "clients"
    assert detect_entity_type("data.xlsx", ["Task List"]) == "tasks"
    assert detect_entity_type("data.xlsx", ["Sheet1"]) is None


def test_load_csv_keeps_headers_and_blanks(clients_csv):
    sheet = load_sheet(clients_csv, entity="clients")
    assert sheet.headers == ["id", "Priority Level", "requestedTasks"]
    assert sheet.rows[0]["requestedTasks"] == "T1,T2"
    assert sheet.rows[1]["Priority Level"] is None


def test_loaded_sheet_validates(clients_csv):
    sheet = load_sheet(clients_csv)
    found = validate_all_data({"clients": sheet.rows})
    assert [d.message for d in found.diagnostics] == [
        'Task ID "T1" not found.',
        'Task ID "T2" not found.',
        'Task ID "T3" not found.',
    ]


def test_load_from_buffer(clients_csv):
    with open(clients_csv, "rb") as fh:
        sheet = load_sheet(fh, filename="upload.csv")
    assert len(sheet) == 2


def test_entity_mismatch_and_bad_files(clients_csv, tmp_path):
    with pytest.raises(FileContentError):
        load_sheet(clients_csv, entity="workers")
    with pytest.raises(UnknownEntityError):
        load_sheet(clients_csv, entity="vendors")
    with pytest.raises(FileContentError):
        load_sheet(tmp_path / "notes.txt")
    with pytest.raises(FileReadingError):
        load_sheet(tmp_path / "missing.csv")


def test_load_workbook(tmp_path):
    path = tmp_path / "book.xlsx"
    with pd.ExcelWriter(path) as writer:
        pd.DataFrame([{"id": "C1", "priorityLevel": 2}]).to_excel(writer, sheet_name="Clients", index=False)
        pd.DataFrame([{"id": "W1", "availableSlots": "1,2", "maxLoadPerPhase": 1}]).to_excel(
            writer, sheet_name="Workers", index=False
        )
        pd.DataFrame([{"note": "ignored"}]).to_excel(writer, sheet_name="Notes", index=False)

    sheets = load_workbook(path)
    assert sheets.clients.rows == [{"id": "C1", "priorityLevel": 2}]
    assert sheets.workers.headers == ["id", "availableSlots", "maxLoadPerPhase"]
    assert sheets.tasks.rows == []


def test_sheet_to_frame_keeps_column_order(clients_csv):
    frame = sheet_to_frame(load_sheet(clients_csv))
    assert list(frame.columns) == ["id", "Priority Level", "requestedTasks"]


def test_workbook_needs_excel_file(clients_csv):
    with pytest.raises(FileContentError):
        load_workbook(clients_csv)
