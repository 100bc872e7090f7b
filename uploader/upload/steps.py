import shutil
from collections.abc import Callable
from pathlib import Path

from uploader.logging.logger import Log
from uploader.rules.engine import RuleEngine
from uploader.upload.pipeline import PipelineStep, UploadContext
from uploader.upload.transport import to_descriptor

SAVE_ERROR_MESSAGE = "Error saving file"

DestinationFactory = Callable[[str, str | None, str], Path]


class ExtractInfoStep(PipelineStep):
    def run(self, context: UploadContext) -> UploadContext:
        context.descriptor = to_descriptor(context.record)
        return context


class ValidateStep(PipelineStep):
    def __init__(self, rule_engine: RuleEngine) -> None:
        self._rule_engine = rule_engine

    def run(self, context: UploadContext) -> UploadContext:
        if context.descriptor is None:
            raise ValueError("UploadContext.descriptor must be set before validation")
        outcome = self._rule_engine.validate(context.descriptor)
        if not outcome.passed:
            context.error_message = outcome.message or ""
        return context


class GenerateDestinationStep(PipelineStep):
    def __init__(self, destination_factory: DestinationFactory) -> None:
        self._destination_factory = destination_factory

    def run(self, context: UploadContext) -> UploadContext:
        if context.descriptor is None:
            raise ValueError("UploadContext.descriptor must be set before naming")
        context.destination = self._destination_factory(
            context.descriptor.extension,
            context.new_name,
            context.descriptor.original_name,
        )
        return context


class PersistStep(PipelineStep):
    """Moves the temporary file to its destination."""

    def run(self, context: UploadContext) -> UploadContext:
        if context.descriptor is None or context.destination is None:
            raise ValueError("UploadContext.destination must be set before persist")
        try:
            shutil.move(context.descriptor.temp_path, context.destination)
        except OSError as exc:
            Log.error(
                f"Failed to move {context.descriptor.temp_path} to {context.destination}: {exc}"
            )
            context.error_message = SAVE_ERROR_MESSAGE
            return context
        context.stored_name = context.destination.name
        return context
