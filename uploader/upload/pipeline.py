from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from uploader.upload.models import FileDescriptor
from uploader.upload.transport import UploadRecord


@dataclass(slots=True)
class UploadContext:
    record: UploadRecord
    new_name: str | None = None
    descriptor: FileDescriptor | None = None
    destination: Path | None = None
    stored_name: str | None = None
    error_message: str | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: UploadContext) -> UploadContext:
        raise NotImplementedError
