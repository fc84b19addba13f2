"""Tests for upload validation and the media uploader."""

import pytest
from asgiref.sync import async_to_sync
from django.core.exceptions import ImproperlyConfigured, ValidationError

from content.exceptions import UploadError
from content.media import (
    MAX_FILE_SIZE,
    MediaUploader,
    FileType,
    ensure_configured,
    format_file_size,
    media_record,
    validate_upload,
)
from content.storage import STORAGE_CLASSES, storage_for

from tests.helpers import FakeStorage, make_file

PDF = "application/pdf"


class TestValidateUpload:
    @pytest.mark.parametrize(
        "file_type, content_type",
        [
            (FileType.IMAGE, "image/webp"),
            (FileType.DOCUMENT, "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
            (FileType.VIDEO, "video/quicktime"),
        ],
    )
    def test_allowed_types_pass(self, file_type, content_type):
        validate_upload(make_file("f", content_type), file_type)

    def test_wrong_type_rejected_with_allowed_list(self):
        with pytest.raises(ValidationError) as info:
            validate_upload(make_file("anim.gif", "image/gif"), FileType.IMAGE, "en")
        assert "Allowed types: image/jpeg, image/png, image/webp" in info.value.messages[0]

    def test_oversize_image_rejected(self):
        f = make_file(size=MAX_FILE_SIZE[FileType.IMAGE] + 1)
        with pytest.raises(ValidationError) as info:
            validate_upload(f, FileType.IMAGE, "en")
        assert "100MB" in info.value.messages[0]

    def test_video_ceiling_is_one_gigabyte(self):
        validate_upload(make_file("clip.mp4", "video/mp4", size=900 * 1024 * 1024), FileType.VIDEO)
        with pytest.raises(ValidationError):
            validate_upload(make_file("clip.mp4", "video/mp4", size=1024 ** 3 + 1), FileType.VIDEO)

    def test_arabic_message(self):
        with pytest.raises(ValidationError) as info:
            validate_upload(make_file("doc.txt", "text/plain"), FileType.DOCUMENT, "ar")
        assert "نوع الملف غير مسموح" in info.value.messages[0]


class TestMediaUploader:
    def test_upload_returns_permanent_url_under_folder(self, uploader, fake_storages):
        url = uploader.upload(make_file("cover.jpg"), FileType.IMAGE)

        assert url.endswith("/image/upload/v1/nada_foundation/cover.jpg")
        assert fake_storages[FileType.IMAGE].saved == ["nada_foundation/cover.jpg"]

    def test_documents_go_to_raw_storage(self, uploader, fake_storages):
        url = uploader.upload(make_file("annual.pdf", PDF), FileType.DOCUMENT)

        assert "/raw/upload/" in url
        assert fake_storages[FileType.IMAGE].saved == []

    def test_folder_is_configurable(self, uploader, settings):
        settings.CONTENT_UPLOAD_FOLDER = "campaigns"
        assert "/campaigns/cover.jpg" in uploader.upload(make_file("cover.jpg"), FileType.IMAGE)

    def test_oversize_file_never_reaches_storage(self, uploader, fake_storages):
        with pytest.raises(ValidationError):
            uploader.upload(make_file(size=MAX_FILE_SIZE[FileType.IMAGE] + 1), FileType.IMAGE)
        assert fake_storages[FileType.IMAGE].saved == []

    def test_storage_failure_becomes_upload_error(self):
        uploader = MediaUploader(storages={FileType.IMAGE: FakeStorage("image", fail=True)})
        with pytest.raises(UploadError) as info:
            uploader.upload(make_file(), FileType.IMAGE)
        assert "cloud unreachable" in info.value.message

    def test_upload_many_keeps_order_and_isolates_failures(self, uploader, fake_storages):
        files = [
            (make_file("a.jpg"), FileType.IMAGE),
            (make_file("big.jpg", size=MAX_FILE_SIZE[FileType.IMAGE] + 1), FileType.IMAGE),
            (make_file("c.pdf", PDF), FileType.DOCUMENT),
        ]

        outcomes = async_to_sync(uploader.upload_many)(files)

        assert [o.name for o in outcomes] == ["a.jpg", "big.jpg", "c.pdf"]
        assert [o.ok for o in outcomes] == [True, False, True]
        assert "100MB" in outcomes[1].error
        assert "nada_foundation/big.jpg" not in fake_storages[FileType.IMAGE].saved

    def test_upload_many_empty(self, uploader):
        assert async_to_sync(uploader.upload_many)([]) == []


class TestHelpers:
    def test_format_file_size(self):
        assert format_file_size(int(2.5 * 1024 * 1024)) == "2.50 MB"
        assert format_file_size(0) == "0.00 MB"

    def test_media_record_shape(self):
        record = media_record("https://x/y.jpg", caption_en="Opening day")
        assert record["url"] == "https://x/y.jpg"
        assert record["caption_ar"] == ""
        assert record["caption_en"] == "Opening day"
        assert "T" in record["uploaded_at"]


class TestStorageMapping:
    def test_resource_type_per_file_type(self):
        assert STORAGE_CLASSES["document"].__name__ == "RawMediaCloudinaryStorage"
        assert STORAGE_CLASSES["video"].__name__ == "VideoMediaCloudinaryStorage"
        assert STORAGE_CLASSES["image"].__name__ == "MediaCloudinaryStorage"

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            storage_for("audio")


class TestConfiguration:
    def test_complete_settings_pass(self):
        ensure_configured()

    def test_missing_secret_is_fatal(self, settings):
        settings.CLOUDINARY_STORAGE = {"CLOUD_NAME": "c", "API_KEY": "k", "API_SECRET": None}
        with pytest.raises(ImproperlyConfigured) as info:
            ensure_configured()
        assert "CLOUDINARY_API_SECRET" in str(info.value)
