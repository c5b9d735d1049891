"""
File Upload Utility - validate uploaded files before they go to storage.

Upload kinds:
- profile-picture: images (JPG, PNG, GIF, WEBP), max 2MB
- resume: PDF, DOC, DOCX, max 5MB
- verification: PDF, JPG, PNG, max 10MB
"""

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from fastapi import HTTPException, UploadFile

MB = 1024 * 1024


@dataclass(frozen=True)
class UploadRule:
    label: str
    extensions: FrozenSet[str]
    content_types: FrozenSet[str]
    max_size_mb: int
    resource_type: str

    @property
    def max_size_bytes(self) -> int:
        return self.max_size_mb * MB


UPLOAD_RULES = {
    "profile-picture": UploadRule(
        label="Images (JPG, PNG, GIF, WEBP)",
        extensions=frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"}),
        content_types=frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"}),
        max_size_mb=2,
        resource_type="image",
    ),
    "resume": UploadRule(
        label="PDF, DOC, DOCX",
        extensions=frozenset({".pdf", ".doc", ".docx"}),
        content_types=frozenset({
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        }),
        max_size_mb=5,
        resource_type="raw",
    ),
    "verification": UploadRule(
        label="PDF, JPG, PNG",
        extensions=frozenset({".pdf", ".jpg", ".jpeg", ".png"}),
        content_types=frozenset({"application/pdf", "image/jpeg", "image/png"}),
        max_size_mb=10,
        resource_type="auto",
    ),
}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_validated_upload(file: UploadFile, kind: str) -> Tuple[bytes, UploadRule]:
    """
    Read an upload and check it against the rule for `kind`.

    Returns:
        Tuple of (content, rule)

    Raises:
        HTTPException 400 bad/missing file, 413 too large
    """
    rule = UPLOAD_RULES[kind]

    if not file or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    ext = get_file_extension(file.filename)
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if ext not in rule.extensions or content_type not in rule.content_types:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type. Allowed: {rule.label}"
        )

    too_large = HTTPException(
        status_code=413,
        detail=f"File too large. Maximum size: {rule.max_size_mb}MB"
    )
    if getattr(file, "size", None) and file.size > rule.max_size_bytes:
        raise too_large

    # Never buffer more than one byte past the limit
    content = await file.read(rule.max_size_bytes + 1)

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    if len(content) > rule.max_size_bytes:
        raise too_large

    return content, rule
