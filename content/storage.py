# content/storage.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from cloudinary_storage.storage import (
    MediaCloudinaryStorage,
    RawMediaCloudinaryStorage,
    VideoMediaCloudinaryStorage,
)

# نوع الملف → تخزين Cloudinary (resource_type: image / raw / video)
# المستندات (PDF/DOC/DOCX) تُرفع raw بوصول عام ليعمل fl_attachment في روابط التنزيل
STORAGE_CLASSES = {
    "image": MediaCloudinaryStorage,
    "document": RawMediaCloudinaryStorage,
    "video": VideoMediaCloudinaryStorage,
}


def storage_for(file_type: str):
    try:
        return STORAGE_CLASSES[str(file_type)]()
    except KeyError:
        raise ValueError(f"Unsupported file type: {file_type}") from None
