"""
Service functions for the employees app.

Document storage, visa status refresh and bulk import from Excel using
openpyxl.
"""
import logging
import os
import re
import time
import zipfile
from datetime import date, datetime
from io import BytesIO

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, transaction
from django.db.models import Q

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from employees.models import Employee, EmployeeDocument, calculate_visa_status
from storage.b2 import B2StorageClient, get_storage_client

logger = logging.getLogger("visatrack")

ALLOWED_DOCUMENT_EXTENSIONS = {
    ".pdf", ".jpg", ".jpeg", ".png", ".doc", ".docx", ".xls", ".xlsx",
}
BLOCKED_DOCUMENT_EXTENSIONS = {
    ".exe", ".bat", ".cmd", ".com", ".pif", ".scr", ".vbs", ".js",
}
DEFAULT_MAX_UPLOAD_BYTES = 2 * 1024 * 1024


def own_records_filter(user, prefix=""):
    """Q matching the employee record whose e-mail equals *user*'s.

    *prefix* reaches the employee through a relation, e.g. ``"employee__"``
    for documents.  A blank address never matches.
    """
    return Q(**{f"{prefix}email__iexact": user.email}) & ~Q(**{f"{prefix}email": ""})


def find_readable_document(user, file_name):
    """Return the ``EmployeeDocument`` stored as *file_name* that *user* may read.

    Admins may read any document; other profiles only those of their own
    employee record.  Returns ``None`` when nothing matches.
    """
    documents = EmployeeDocument.objects.filter(file_name=file_name)
    if not user.is_admin:
        documents = documents.filter(own_records_filter(user, prefix="employee__"))
    return documents.first()


def validate_document_file(file_name, file_size):
    """Reject empty, oversized or disallowed files.

    Raises ``django.core.exceptions.ValidationError`` listing every
    problem found.
    """
    errors = []
    max_bytes = getattr(settings, "DOCUMENT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    extension = os.path.splitext(file_name or "")[1].lower()

    if not file_name or not file_name.strip():
        errors.append("File name is required.")
    if not file_size:
        errors.append("File is empty.")
    elif file_size > max_bytes:
        errors.append(f"File size ({file_size} bytes) exceeds the {max_bytes} byte limit.")
    if extension in BLOCKED_DOCUMENT_EXTENSIONS:
        errors.append("This file type is not allowed for security reasons.")
    elif extension not in ALLOWED_DOCUMENT_EXTENSIONS:
        errors.append(
            f'File type "{extension or "unknown"}" is not supported. '
            "Allowed formats: PDF, JPG, PNG, DOC, DOCX, XLS, XLSX."
        )

    if errors:
        raise ValidationError(errors)


def build_document_object_name(employee, document_type, original_name, now=None):
    """Object name in the bucket: ``employees/<employee_id>/<type>/<ms>_<name>``."""
    timestamp = int((now if now is not None else time.time()) * 1000)
    sanitized = re.sub(r"[^a-zA-Z0-9.-]", "_", original_name)
    return f"employees/{employee.employee_id}/{document_type}/{timestamp}_{sanitized}"


def upload_employee_document(
    employee,
    *,
    file_name,
    file_bytes,
    document_type,
    uploaded_by=None,
    mime_type="",
    client: B2StorageClient | None = None,
    **metadata,
):
    """Store a file for *employee* and record its metadata.

    The bytes go to the object store first; the ``EmployeeDocument`` row
    is only written once the provider has accepted them.  *metadata* may
    carry ``expiry_date``, ``notes``, ``document_number`` and
    ``issuing_authority``.
    """
    validate_document_file(file_name, len(file_bytes))

    client = client or get_storage_client()
    object_name = build_document_object_name(employee, document_type, file_name)
    result = client.upload(object_name, file_bytes, mime_type or None)

    document = EmployeeDocument.objects.create(
        employee=employee,
        document_type=document_type,
        file_name=result.file_name,
        storage_id=result.file_id,
        file_size=len(file_bytes),
        mime_type=mime_type or "",
        uploaded_by=uploaded_by,
        **metadata,
    )
    logger.info(
        "Document %s (%s) uploaded for employee %s",
        document.pk, document_type, employee.employee_id,
    )
    return document


def delete_employee_document(document, client: B2StorageClient | None = None):
    """Remove the stored object, then the metadata row."""
    if document.storage_id:
        client = client or get_storage_client()
        client.delete(document.file_name, document.storage_id)
    document_id = document.pk
    document.delete()
    logger.info("Document %s deleted", document_id)


def refresh_visa_statuses(today=None):
    """Recompute the stored visa status of every employee.

    Rows whose status already matches are left untouched.  Returns the
    number of employees updated.
    """
    updated = 0
    employees = Employee.objects.only("id", "visa_expiry_date", "visa_status")
    with transaction.atomic():
        for employee in employees.iterator():
            status = calculate_visa_status(employee.visa_expiry_date, today)
            if status != employee.visa_status:
                Employee.objects.filter(pk=employee.pk).update(visa_status=status)
                updated += 1
    return updated


# =========================================================================
# IMPORT
# =========================================================================

# Expected column order for the import spreadsheet (first row is a header).
IMPORT_COLUMNS = [
    "employee_id",        # A
    "name",               # B
    "trade",              # C
    "nationality",        # D
    "date_of_birth",      # E - DD-MM-YYYY
    "mobile_number",      # F
    "home_phone_number",  # G - optional
    "email",              # H
    "company_id",         # I
    "company_name",       # J
    "join_date",          # K - DD-MM-YYYY
    "visa_expiry_date",   # L - DD-MM-YYYY
    "passport_number",    # M
]
OPTIONAL_IMPORT_COLUMNS = {"home_phone_number"}
IMPORT_DATE_COLUMNS = ("date_of_birth", "join_date", "visa_expiry_date")
IMPORT_DATE_FORMAT = "%d-%m-%Y"


def _cell_text(value):
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Phone numbers and IDs typed into numeric cells.
        value = int(value)
    return str(value).strip()


def _parse_import_date(field, value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(_cell_text(value), IMPORT_DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f'Invalid date for "{field}": expected DD-MM-YYYY.')


def _employee_values_from_row(row):
    padded = list(row) + [None] * (len(IMPORT_COLUMNS) - len(row))
    raw = dict(zip(IMPORT_COLUMNS, padded))

    missing = [
        column for column in IMPORT_COLUMNS
        if column not in OPTIONAL_IMPORT_COLUMNS and not _cell_text(raw[column])
    ]
    if missing:
        raise ValueError(f"Missing required field(s): {', '.join(missing)}.")

    values = {column: _cell_text(raw[column]) for column in IMPORT_COLUMNS}
    try:
        validate_email(values["email"])
    except ValidationError:
        raise ValueError(f'Invalid e-mail "{values["email"]}".')
    for column in IMPORT_DATE_COLUMNS:
        values[column] = _parse_import_date(column, raw[column])
    return values


def import_employees_from_excel(file, user=None) -> dict:
    """
    Import employees from an uploaded Excel (.xlsx) file.

    Columns follow ``IMPORT_COLUMNS``.  Rows are keyed by ``employee_id``:
    unknown ids are created, known ids are updated.  A bad row is reported
    and skipped; the other rows are still imported.

    Returns a dict with counts::

        {"created": int, "updated": int, "errors": int, "error_details": list[str]}
    """
    try:
        wb = openpyxl.load_workbook(file, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ValidationError("The file is not a readable .xlsx workbook.") from exc
    ws = wb.active

    created = 0
    updated = 0
    errors = 0
    error_details: list[str] = []
    seen_ids = set()

    rows = ws.iter_rows(min_row=2, values_only=True)  # skip header
    for row_idx, row in enumerate(rows, start=2):
        if not any(_cell_text(value) for value in row):
            continue
        try:
            values = _employee_values_from_row(row)
            employee_id = values.pop("employee_id")
            if employee_id in seen_ids:
                raise ValueError(f'Duplicate employee_id "{employee_id}" in file.')
            seen_ids.add(employee_id)

            defaults = {**values, "updated_by": user}
            with transaction.atomic():
                _, was_created = Employee.objects.update_or_create(
                    employee_id=employee_id,
                    defaults=defaults,
                    create_defaults={**defaults, "created_by": user},
                )
        except (ValueError, DatabaseError) as exc:
            errors += 1
            detail = f"Row {row_idx}: {exc}"
            error_details.append(detail)
            logger.warning("Employee import - %s", detail)
            continue

        if was_created:
            created += 1
        else:
            updated += 1

    wb.close()

    logger.info(
        "Employee import finished: %d created, %d updated, %d error(s).",
        created, updated, errors,
    )

    return {
        "created": created,
        "updated": updated,
        "errors": errors,
        "error_details": error_details,
    }


def build_import_template() -> bytes:
    """Empty workbook with the import header row, as .xlsx bytes."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Employees"

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
    for col_idx, column in enumerate(IMPORT_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=column)
        cell.font = header_font
        cell.fill = header_fill
        ws.column_dimensions[get_column_letter(col_idx)].width = max(len(column) + 4, 14)

    content = BytesIO()
    wb.save(content)
    return content.getvalue()
