"""CRUD operations for ORM models."""

from csv_processor.boundary.db.CRUD.base_crud import BaseCRUD
from csv_processor.boundary.db.CRUD.csv_job_crud import CsvJobCRUD, csv_job_crud
from csv_processor.boundary.db.CRUD.csv_record_crud import CsvRecordCRUD, csv_record_crud

__all__ = [
    "BaseCRUD",
    "CsvJobCRUD",
    "CsvRecordCRUD",
    "csv_job_crud",
    "csv_record_crud",
]
