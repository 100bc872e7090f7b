"""Reading the upload table handed over by the request layer.

Each field maps to a record with the keys ``name``, ``type``, ``tmp_name``,
``error`` and ``size``. A batch record holds parallel lists under the same keys.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from uploader.upload.models import FileDescriptor, TransportStatus

UploadRecord = Mapping[str, Any]
UploadTable = Mapping[str, UploadRecord]

TRANSPORT_MESSAGES: dict[int, str] = {
    TransportStatus.INI_SIZE: "File exceeds the maximum upload size allowed by the server",
    TransportStatus.FORM_SIZE: "File exceeds the maximum size allowed by the form",
    TransportStatus.PARTIAL: "File was only partially uploaded",
    TransportStatus.NO_FILE: "No file was uploaded",
    TransportStatus.NO_TMP_DIR: "Missing temporary folder",
    TransportStatus.CANT_WRITE: "Failed to write file to disk",
    TransportStatus.EXTENSION: "File upload stopped by an extension",
}


def transport_error_message(code: int) -> str:
    return TRANSPORT_MESSAGES.get(code, f"Unknown upload error (code: {code})")


def is_batch(record: UploadRecord) -> bool:
    return isinstance(record.get("name"), (list, tuple))


def batch_size(record: UploadRecord) -> int:
    return len(record["name"]) if is_batch(record) else 1


def record_status(record: UploadRecord, index: int | None = None) -> int:
    error = record.get("error", TransportStatus.NO_FILE)
    if index is not None:
        error = error[index]
    return int(error)


def element(record: UploadRecord, index: int) -> UploadRecord:
    """Pick one file out of a batch record."""
    return {key: values[index] for key, values in record.items()}


def to_descriptor(record: UploadRecord) -> FileDescriptor:
    return FileDescriptor(
        original_name=str(record["name"]),
        temp_path=Path(record["tmp_name"]),
        declared_size=int(record.get("size", 0)),
        declared_mime=str(record.get("type") or ""),
        transport_error=int(record.get("error", TransportStatus.OK)),
    )
