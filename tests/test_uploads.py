"""
Tests for the upload pipeline and preview generation.
"""

import re

import pytest
from PIL import Image

from portfolio.errors import UploadRejected
from portfolio.media.processing import (
    WATERMARK_FILL,
    _watermark_layer,
    generate_thumbnail,
    generate_video_thumbnail,
)
from portfolio.media.uploads import IncomingFile, UploadPipeline
from tests.helpers import PDF_BYTES, image_bytes


def png(name="photo.png", size=(1600, 1200), color="red", field="files"):
    return IncomingFile(field=field, filename=name, content_type="image/png",
                        data=image_bytes(size, color))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def pipeline(tmp_path):
    return UploadPipeline(
        secure_dir=tmp_path / "secure",
        thumbnails_dir=tmp_path / "thumbnails",
        max_file_size=1024 * 1024,
        max_files=3,
        watermark_text="© Test Preview",
    )


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    def test_empty_batch(self, pipeline):
        with pytest.raises(UploadRejected, match="No file uploaded"):
            pipeline.store_media([])

    def test_too_many_files(self, pipeline):
        with pytest.raises(UploadRejected, match="Too many files"):
            pipeline.store_media([png(f"{i}.png") for i in range(4)])

    @pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", "image/svg+xml"])
    def test_type_not_allowed(self, pipeline, content_type):
        f = IncomingFile(field="files", filename="x", content_type=content_type, data=b"x")

        with pytest.raises(UploadRejected) as exc_info:
            pipeline.store_media([f])
        assert exc_info.value.status_code == 400
        assert content_type in exc_info.value.message

    def test_batch_rejected_before_anything_is_written(self, pipeline):
        big = IncomingFile(field="files", filename="big.png", content_type="image/png",
                           data=b"\0" * (1024 * 1024 + 1))

        with pytest.raises(UploadRejected, match="exceeds"):
            pipeline.store_media([png(), big])
        assert list(pipeline.secure_dir.iterdir()) == []
        assert list(pipeline.thumbnails_dir.iterdir()) == []

    def test_cv_must_be_pdf(self, pipeline):
        with pytest.raises(UploadRejected):
            pipeline.store_cv(png(field="cv"))


# =============================================================================
# Storage
# =============================================================================


class TestStoreMedia:
    def test_image_stored_with_preview(self, pipeline):
        [item] = pipeline.store_media([png("Photo.PNG")])

        assert re.fullmatch(r"files-\d+-\d+\.png", item.filename)
        assert item.original_name == "Photo.PNG"
        assert item.mimetype == "image/png"
        assert item.size > 0
        assert (pipeline.secure_dir / item.filename).exists()
        assert item.thumbnail_path == f"/thumbnails/thumb_{item.filename}.jpg"

        with Image.open(pipeline.thumbnail_path(item.filename)) as preview:
            assert preview.format == "JPEG"
            assert preview.size == (800, 600)

    def test_original_is_untouched(self, pipeline):
        f = png()
        [item] = pipeline.store_media([f])

        assert (pipeline.secure_dir / item.filename).read_bytes() == f.data

    def test_video_gets_placeholder(self, pipeline):
        video = IncomingFile(field="files", filename="clip.mp4", content_type="video/mp4",
                             data=b"\0\0\0\x18ftypmp42")
        [item] = pipeline.store_media([video])

        with Image.open(pipeline.thumbnail_path(item.filename)) as preview:
            assert preview.size == (800, 600)

    def test_unreadable_image_keeps_original_without_preview(self, pipeline):
        broken = IncomingFile(field="files", filename="broken.png", content_type="image/png",
                              data=b"not really a png")
        [item] = pipeline.store_media([broken])

        assert item.thumbnail_path is None
        assert (pipeline.secure_dir / item.filename).exists()

    def test_names_are_unique(self, pipeline):
        items = pipeline.store_media([png("a.png"), png("a.png"), png("a.png")])
        assert len({i.filename for i in items}) == 3

    def test_store_cv(self, pipeline):
        cv = IncomingFile(field="cv", filename="resume.pdf", content_type="application/pdf",
                          data=PDF_BYTES)
        info = pipeline.store_cv(cv)

        assert re.fullmatch(r"cv-\d+-\d+\.pdf", info["filename"])
        assert info["originalName"] == "resume.pdf"
        assert (pipeline.secure_dir / info["filename"]).read_bytes() == PDF_BYTES
        assert list(pipeline.thumbnails_dir.iterdir()) == []


class TestFilenames:
    @pytest.mark.parametrize("original,ext", [
        ("photo.JPG", ".jpg"),
        ("archive.tar.gz", ".gz"),
        ("noext", ""),
        ("weird.ph p", ""),
        ("", ""),
    ])
    def test_extension_kept_only_if_plain(self, original, ext):
        name = UploadPipeline.generate_filename("files", original)
        assert re.fullmatch(r"files-\d+-\d+" + re.escape(ext), name)

    @pytest.mark.parametrize("bad", ["../etc/passwd", "a/b.png", "..", ""])
    def test_path_components_rejected(self, pipeline, bad):
        with pytest.raises(ValueError):
            pipeline.original_path(bad)


class TestDelete:
    def test_removes_original_and_preview(self, pipeline):
        [item] = pipeline.store_media([png()])

        pipeline.delete(item.filename)

        assert not pipeline.original_path(item.filename).exists()
        assert not pipeline.thumbnail_path(item.filename).exists()

    def test_missing_files_are_fine(self, pipeline):
        pipeline.delete("files-1-2.png")


# =============================================================================
# Preview Generation
# =============================================================================


class TestThumbnails:
    def test_never_enlarged(self, tmp_path):
        src = tmp_path / "small.png"
        src.write_bytes(image_bytes((100, 50)))

        assert generate_thumbnail(src, tmp_path / "out.jpg")
        with Image.open(tmp_path / "out.jpg") as out:
            assert out.size == (100, 50)

    def test_aspect_ratio_kept(self, tmp_path):
        src = tmp_path / "tall.png"
        src.write_bytes(image_bytes((600, 1200)))

        assert generate_thumbnail(src, tmp_path / "out.jpg")
        with Image.open(tmp_path / "out.jpg") as out:
            assert out.size == (300, 600)

    def test_watermark_is_drawn(self, tmp_path):
        src = tmp_path / "black.png"
        src.write_bytes(image_bytes((400, 300), color="black"))

        assert generate_thumbnail(src, tmp_path / "out.jpg")
        with Image.open(tmp_path / "out.jpg") as out:
            _, brightest = out.convert("L").getextrema()
        assert brightest > 40

    def test_watermark_layer_keeps_text_opacity(self):
        layer = _watermark_layer((400, 300), "© Test Preview")

        _, strongest = layer.getchannel("A").getextrema()
        assert strongest >= WATERMARK_FILL[3] - 5

    def test_failure_returns_false(self, tmp_path):
        src = tmp_path / "junk.png"
        src.write_bytes(b"junk")

        assert not generate_thumbnail(src, tmp_path / "out.jpg")
        assert not (tmp_path / "out.jpg").exists()

    def test_video_placeholder(self, tmp_path):
        assert generate_video_thumbnail(tmp_path / "v.jpg", watermark_text="© Test")
        with Image.open(tmp_path / "v.jpg") as out:
            assert out.format == "JPEG"
            assert out.size == (800, 600)
