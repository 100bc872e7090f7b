from pathlib import Path
from unittest.mock import MagicMock

import pytest

from uploader.rules import probes
from uploader.rules.engine import RuleEngine
from uploader.rules.exceptions import InvalidRuleKindError
from uploader.rules.models import RuleKind
from uploader.upload.models import FileDescriptor


def _descriptor(name: str = "photo.jpg", size: int = 500, mime: str = "image/jpeg") -> FileDescriptor:
    return FileDescriptor(
        original_name=name,
        temp_path=Path("/nonexistent/php1"),
        declared_size=size,
        declared_mime=mime,
    )


@pytest.fixture(autouse=True)
def _no_sniffing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(probes, "sniff_mime_type", lambda _path: None)


class TestAddRule:
    def test_builtin_kinds_register_named_rules(self) -> None:
        engine = (
            RuleEngine()
            .add_rule("mime", "image/*")
            .add_rule("extension", "jpg", "png")
            .add_rule("size", 1000)
            .add_rule("resize_maxmin", 10, 10, 100, 100)
        )
        assert [rule.name for rule in engine.rules] == [
            "mime_type",
            "extension",
            "file_size",
            "image_size",
        ]

    def test_accepts_enum_kind_and_list_params(self) -> None:
        engine = RuleEngine().add_rule(RuleKind.EXTENSION, ["jpg", "png"])
        assert engine.rules[0].message == "Invalid file extension. Allowed: jpg, png"

    def test_messages(self) -> None:
        engine = (
            RuleEngine()
            .add_rule("mime", "image/png", "image/jpeg")
            .add_rule("size", 1536)
            .add_rule("resize_maxmin", 10, 20, 300, 400)
        )
        assert [rule.message for rule in engine.rules] == [
            "Invalid file type. Allowed: image/png, image/jpeg",
            "File is too large. Maximum size: 1.5 KB",
            "Image must be at least 10x20 and at most 300x400 pixels",
        ]

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(InvalidRuleKindError, match="checksum"):
            RuleEngine().add_rule("checksum", "abc")

    def test_wrong_parameter_count_raises(self) -> None:
        with pytest.raises(InvalidRuleKindError, match="resize_maxmin"):
            RuleEngine().add_rule("resize_maxmin", 10, 10)

    def test_non_numeric_size_raises(self) -> None:
        with pytest.raises(InvalidRuleKindError, match="size"):
            RuleEngine().add_rule("size", "big")

    def test_same_kind_replaces_previous_rule(self) -> None:
        engine = RuleEngine().add_rule("size", 10).add_rule("extension", "jpg").add_rule("size", 5000)
        assert len(engine) == 2
        assert [rule.name for rule in engine.rules] == ["file_size", "extension"]
        assert engine.validate(_descriptor(size=4000)).passed


class TestAddCustomRule:
    def test_registers_and_replaces_by_name(self) -> None:
        engine = RuleEngine()
        engine.add_custom_rule("even", lambda d: d.declared_size % 2 == 0, "Size must be even")
        engine.add_custom_rule("even", lambda d: True, "never")
        assert len(engine) == 1
        assert engine.validate(_descriptor(size=3)).passed

    def test_validator_receives_descriptor(self) -> None:
        validator = MagicMock(return_value=True)
        descriptor = _descriptor()
        RuleEngine().add_custom_rule("spy", validator, "x").validate(descriptor)
        validator.assert_called_once_with(descriptor)


class TestValidate:
    def test_empty_rule_set_passes(self) -> None:
        outcome = RuleEngine().validate(_descriptor())
        assert outcome.passed
        assert outcome.message is None

    def test_extension_failure_reported_first(self) -> None:
        engine = RuleEngine().add_rule("extension", "jpg", "png").add_rule("size", 1000)
        outcome = engine.validate(_descriptor(name="photo.gif", size=500, mime="image/gif"))
        assert not outcome.passed
        assert outcome.message == "Invalid file extension. Allowed: jpg, png"

    def test_size_failure_after_extension_passes(self) -> None:
        engine = RuleEngine().add_rule("extension", "jpg", "png").add_rule("size", 1000)
        outcome = engine.validate(_descriptor(name="photo.jpg", size=2000))
        assert outcome.message == "File is too large. Maximum size: 1000 B"

    def test_stops_at_first_failure(self) -> None:
        later = MagicMock(return_value=True)
        engine = (
            RuleEngine()
            .add_custom_rule("first", lambda _d: False, "first failed")
            .add_custom_rule("second", later, "second failed")
        )
        assert engine.validate(_descriptor()).message == "first failed"
        later.assert_not_called()

    def test_mime_rule_uses_declared_type(self) -> None:
        engine = RuleEngine().add_rule("mime", "image/*")
        assert engine.validate(_descriptor(mime="image/jpeg")).passed
        assert not engine.validate(_descriptor(mime="text/plain")).passed
