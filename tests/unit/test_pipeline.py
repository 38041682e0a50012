"""Tests for the fail-soft service entry points."""

import base64
import io
import sys

import numpy as np
from PIL import Image

from locked_preview import lock_image, lock_record
from locked_preview.core.definitions import EMPTY_LOCKED_RECORD, LOCK_PLACEHOLDER
from locked_preview.core.domain import BlurParameters
from locked_preview.engine.image_redactor import encode_png, to_data_url
from locked_preview.engine.record_redactor import shape
from locked_preview.service.config import settings
from locked_preview.service.pipeline import PreviewService


class TestLockImage:
    """Tests for lock_image."""

    def test_data_url_in_png_data_url_out(self, stripes_image, params) -> None:
        source = to_data_url(encode_png(stripes_image))
        result = lock_image(source, params)
        assert isinstance(result, str)
        assert result.startswith("data:image/png;base64,")
        assert result != source

    def test_jpeg_data_url_is_reencoded_as_png(self, stripes_image, params) -> None:
        buffer = io.BytesIO()
        stripes_image.save(buffer, format="JPEG")
        source = "data:image/jpeg;base64," + base64.b64encode(buffer.getvalue()).decode()
        result = lock_image(source, params)
        assert result.startswith("data:image/png;base64,")

    def test_bytes_in_png_bytes_out(self, stripes_image, params) -> None:
        result = lock_image(encode_png(stripes_image), params)
        assert isinstance(result, bytes)
        assert result.startswith(b"\x89PNG")
        assert Image.open(io.BytesIO(result)).size == stripes_image.size

    def test_image_in_image_out(self, stripes_image, params) -> None:
        result = lock_image(stripes_image, params)
        assert isinstance(result, Image.Image)
        assert result.size == stripes_image.size

    def test_uses_settings_when_no_params_given(self, stripes_image) -> None:
        result = lock_image(stripes_image)
        top = settings.blur_parameters()
        assert isinstance(result, Image.Image)
        rows = int(np.floor(stripes_image.height * top.visible_ratio + 0.5)) - int(
            np.floor(stripes_image.height * top.fade_ratio + 0.5)
        )
        assert np.array_equal(
            np.array(result)[:rows], np.array(stripes_image.convert("RGBA"))[:rows]
        )

    def test_undecodable_source_is_returned_unchanged(self) -> None:
        source = b"not an image at all"
        assert lock_image(source) is source

    def test_malformed_data_url_is_returned_unchanged(self) -> None:
        source = "data:image/png;base64,@@@@"
        assert lock_image(source) is source

    def test_invalid_radius_returns_source(self, stripes_image) -> None:
        assert lock_image(stripes_image, BlurParameters(blur_radius=0)) is stripes_image

    def test_empty_source_is_returned_unchanged(self) -> None:
        assert lock_image("") == ""
        assert lock_image(b"") == b""

    def test_unexpected_errors_fall_back_to_source(self, stripes_image, monkeypatch) -> None:
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(PreviewService, "get_image_redactor", explode)
        assert lock_image(stripes_image) is stripes_image


class TestLockRecord:
    """Tests for lock_record."""

    def test_redacts_through_the_table(self, sample_record) -> None:
        locked = lock_record(sample_record)
        assert locked["title"] == LOCK_PLACEHOLDER
        assert locked["personal_info"]["image"] is None
        assert locked["personal_info"]["twitter"] == "@hidden"
        assert locked["personal_info"]["email"] == "hidden@email.com"
        assert locked["experience"][0]["company"] == "Locked Company"
        assert shape(locked) == shape(sample_record)

    def test_default_path_normalises_top_level(self) -> None:
        locked = lock_record(
            {"title": "CV", "personal_info": {"image": "https://cdn/u/ada.png", "twitter": "@ada"}}
        )
        assert locked == {
            **EMPTY_LOCKED_RECORD,
            "title": LOCK_PLACEHOLDER,
            "personal_info": {"image": None, "twitter": "@hidden"},
        }

    def test_missing_table_returns_the_empty_record(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "placeholder_table", "/nonexistent/table.yaml")
        PreviewService.reset()

        record = {
            "title": "Resume",
            "skills": ["Go", ""],
            "personal_info": {"image": "https://cdn/u/ada.png"},
        }
        locked = lock_record(record)

        assert locked == EMPTY_LOCKED_RECORD
        assert locked["personal_info"] == {}

    def test_missing_table_with_non_mapping_record(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "placeholder_table", "/nonexistent/table.yaml")
        PreviewService.reset()
        assert lock_record(["not", "a", "record"]) == EMPTY_LOCKED_RECORD

    def test_fallback_record_is_a_fresh_copy(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "placeholder_table", "/nonexistent/table.yaml")
        PreviewService.reset()
        lock_record({})["skills"].append("leak")
        assert lock_record({})["skills"] == []

    def test_deeply_nested_record_does_not_raise(self) -> None:
        nested: dict = {}
        innermost = nested
        for _ in range(sys.getrecursionlimit() + 50):
            innermost["child"] = {}
            innermost = innermost["child"]

        assert lock_record({"title": "CV", "custom": nested}) == EMPTY_LOCKED_RECORD

    def test_cyclic_record_does_not_raise(self) -> None:
        record: dict = {"title": "CV"}
        record["self"] = record
        assert lock_record(record) == EMPTY_LOCKED_RECORD

    def test_never_raises_on_malformed_input(self) -> None:
        for record in (None, "text", 42, [], {"experience": "oops"}):
            assert isinstance(lock_record(record), dict)
