from pathlib import Path

from uploader.config.settings import Settings
from uploader.logging.logger import Log
from uploader.rules.engine import RuleEngine
from uploader.rules.models import RuleKind, Validator
from uploader.upload.exceptions import (
    DestinationExistsError,
    InvalidDestinationError,
    UploadDirectoryError,
)
from uploader.upload.filenames import generate_unique_name, sanitize_filename
from uploader.upload.models import TransportStatus, UploadOutcome, split_filename
from uploader.upload.pipeline import PipelineStep, UploadContext
from uploader.upload.steps import (
    ExtractInfoStep,
    GenerateDestinationStep,
    PersistStep,
    ValidateStep,
)
from uploader.upload.transport import (
    UploadRecord,
    UploadTable,
    batch_size,
    element,
    is_batch,
    record_status,
    transport_error_message,
)

NO_UPLOADS_MESSAGE = "No files were uploaded"


class UploadPipeline:
    """Validates uploaded files and moves accepted ones into the upload directory.

    Pipeline per file: extract info -> validate -> generate destination -> persist.
    Validation and save failures are collected in the error log; a name
    conflict or an unusable upload directory raises.

    An instance keeps per-call state and must not be shared between
    concurrent requests.
    """

    def __init__(
        self,
        upload_dir: str | Path = "uploads/",
        field_name: str = "file",
        rule_engine: RuleEngine | None = None,
    ) -> None:
        self._field_name = field_name
        self._rule_engine = rule_engine if rule_engine is not None else RuleEngine()
        self._auto_rename = True
        self._overwrite = False
        self._sanitize = True
        self._errors: list[str] = []
        self.set_upload_dir(upload_dir)
        self._steps: list[PipelineStep] = [
            ExtractInfoStep(),
            ValidateStep(self._rule_engine),
            GenerateDestinationStep(self.generate_destination),
            PersistStep(),
        ]

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    @property
    def field_name(self) -> str:
        return self._field_name

    @property
    def rule_engine(self) -> RuleEngine:
        return self._rule_engine

    def add_rule(self, kind: RuleKind | str, *params: object) -> "UploadPipeline":
        self._rule_engine.add_rule(kind, *params)
        return self

    def add_custom_rule(self, name: str, validator: Validator, message: str) -> "UploadPipeline":
        self._rule_engine.add_custom_rule(name, validator, message)
        return self

    def set_upload_dir(self, path: str | Path) -> "UploadPipeline":
        """Set the destination directory, creating it and its parents if missing.

        Raises:
            UploadDirectoryError: if the directory cannot be created.
        """
        upload_dir = Path(path)
        try:
            upload_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise UploadDirectoryError(
                f"Cannot create upload directory {upload_dir}: {exc}"
            ) from exc
        self._upload_dir = upload_dir
        return self

    def set_auto_rename(self, auto_rename: bool) -> "UploadPipeline":
        self._auto_rename = auto_rename
        return self

    def set_overwrite(self, overwrite: bool) -> "UploadPipeline":
        self._overwrite = overwrite
        return self

    def set_sanitize_filename(self, sanitize: bool) -> "UploadPipeline":
        self._sanitize = sanitize
        return self

    def get_errors(self) -> list[str]:
        return list(self._errors)

    def get_last_error(self) -> str | None:
        return self._errors[-1] if self._errors else None

    def has_uploads(self, files: UploadTable) -> bool:
        """True if the configured field holds at least one successfully transferred file."""
        record = files.get(self._field_name)
        if record is None:
            return False
        if is_batch(record):
            return any(
                record_status(record, index) == TransportStatus.OK
                for index in range(batch_size(record))
            )
        return record_status(record) == TransportStatus.OK

    def upload(self, files: UploadTable, new_name: str | None = None) -> str | list[str] | None:
        """Process the configured field of an upload table.

        Returns the stored filename (or None on failure) for a single file, or
        the stored filenames of the accepted files for a batch. Reasons for
        rejected files are available from get_errors().

        Raises:
            DestinationExistsError: if a destination exists and overwrite is off.
        """
        self._errors = []
        if not self.has_uploads(files):
            self._reject(NO_UPLOADS_MESSAGE)
            return None

        record = files[self._field_name]
        if is_batch(record):
            return [
                outcome.stored_name
                for outcome in self._process_batch(record, new_name)
                if outcome.stored_name is not None
            ]
        return self._process_single(record, new_name).stored_name

    def upload_detailed(
        self, files: UploadTable, new_name: str | None = None
    ) -> list[UploadOutcome]:
        """Like upload(), but report one outcome per input file, in input order."""
        self._errors = []
        if not self.has_uploads(files):
            self._reject(NO_UPLOADS_MESSAGE)
            return []

        record = files[self._field_name]
        if is_batch(record):
            return self._process_batch(record, new_name)
        return [self._process_single(record, new_name)]

    def generate_destination(
        self, extension: str, new_name: str | None, original_name: str
    ) -> Path:
        """Build the destination path for a file.

        Raises:
            DestinationExistsError: if the file exists and overwrite is off.
            InvalidDestinationError: if the name resolves outside the upload directory.
        """
        if new_name:
            filename = new_name
        elif self._auto_rename:
            filename = generate_unique_name()
        else:
            filename = split_filename(original_name)[0]

        if self._sanitize:
            filename = sanitize_filename(filename)

        # Leading separators would make the join discard upload_dir.
        filename = filename.lstrip("/\\")
        destination = self._upload_dir / (f"{filename}.{extension}" if extension else filename)
        if not destination.resolve().is_relative_to(self._upload_dir.resolve()):
            raise InvalidDestinationError(
                f"Destination escapes the upload directory: {destination}"
            )
        if not self._overwrite and destination.exists():
            raise DestinationExistsError(f"File already exists: {destination.name}")
        return destination

    def _process_batch(self, record: UploadRecord, new_name: str | None) -> list[UploadOutcome]:
        outcomes: list[UploadOutcome] = []
        for index in range(batch_size(record)):
            status = record_status(record, index)
            if status != TransportStatus.OK:
                original_name = str(record["name"][index])
                message = f"{transport_error_message(status)} (file: {original_name})"
                self._reject(message)
                outcomes.append(UploadOutcome(index, original_name, error=message))
                continue
            element_name = f"{new_name}_{index}" if new_name else None
            outcomes.append(self._process_single(element(record, index), element_name, index))
        return outcomes

    def _process_single(
        self, record: UploadRecord, new_name: str | None, index: int = 0
    ) -> UploadOutcome:
        context = UploadContext(record=record, new_name=new_name)
        for step in self._steps:
            context = step.run(context)
            if context.error_message is not None:
                self._reject(context.error_message)
                return UploadOutcome(index, str(record["name"]), error=context.error_message)

        Log.info(f"Stored upload {record['name']!r} as {context.stored_name}")
        return UploadOutcome(index, str(record["name"]), stored_name=context.stored_name)

    def _reject(self, message: str) -> None:
        self._errors.append(message)
        Log.warning(f"Upload rejected: {message}")


def build_pipeline(settings: Settings) -> UploadPipeline:
    """Build an UploadPipeline from application settings."""
    Log.configure(settings.log_level)
    pipeline = (
        UploadPipeline(upload_dir=settings.upload_dir, field_name=settings.upload_field_name)
        .set_auto_rename(settings.auto_rename)
        .set_overwrite(settings.overwrite)
        .set_sanitize_filename(settings.sanitize_filename)
    )
    if settings.allowed_extensions:
        pipeline.add_rule(RuleKind.EXTENSION, settings.allowed_extensions)
    if settings.allowed_mime_types:
        pipeline.add_rule(RuleKind.MIME, settings.allowed_mime_types)
    if settings.max_file_size_bytes > 0:
        pipeline.add_rule(RuleKind.SIZE, settings.max_file_size_bytes)
    return pipeline
