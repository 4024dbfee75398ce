import csv
import io
from datetime import date

from carease.schemas import Payment
from carease.services.export_service import export_filename, export_to_csv, to_csv


def test_empty_collection_produces_no_file():
    assert to_csv([]) is None
    assert export_to_csv([], "payments") is None


def test_header_comes_from_first_record():
    content = to_csv([{"b": 1, "a": "x"}, {"a": "y", "b": 2, "extra": "ignored"}])

    lines = content.splitlines()
    assert lines[0] == "b,a"
    assert lines[1] == "1,x"
    assert lines[2] == "2,y"


def test_commas_and_quotes_are_escaped():
    content = to_csv([{"name": "Brown, Alice", "notes": 'said "hi"'}])

    assert content.splitlines()[1] == '"Brown, Alice","said ""hi"""'
    row = next(csv.DictReader(io.StringIO(content)))
    assert row == {"name": "Brown, Alice", "notes": 'said "hi"'}


def test_records_export_camel_case_without_version():
    payment = Payment(id="pay-1", doctor_id="d1", doctor_name="Dr. One", amount=25.0, date="2030-01-01T00:00:00")

    header = to_csv([payment]).splitlines()[0].split(",")

    assert header == ["id", "doctorId", "doctorName", "amount", "date", "status", "type"]


def test_filename_has_date_suffix():
    assert export_filename("visits", date(2030, 2, 3)) == "visits_2030-02-03.csv"
