from __future__ import annotations

from dataclasses import dataclass, field

from lurm.core.errors import ValidationError

RESOURCE_TYPES: tuple[str, ...] = (
    "Lecture Notes",
    "Textbook",
    "Research Paper",
    "Lab Equipment",
    "Software License",
    "Video Lecture",
    "Other",
)


@dataclass(slots=True)
class Resource:
    id: str
    name: str
    type: str
    course: str
    year: int
    description: str
    keywords: list[str] = field(default_factory=list)
    file_url: str | None = None
    file_name: str | None = None
    file_mime_type: str | None = None
    file_size_bytes: int | None = None
    uploader_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def has_file(self) -> bool:
        return bool(self.file_url and self.file_name)


def normalize_keywords(raw: str | list[str] | None) -> list[str]:
    """Split a comma-separated string (or clean a list) into trimmed, non-empty keywords."""
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    return [str(item).strip() for item in items if str(item).strip()]


def validate_resource(resource: Resource) -> None:
    if not str(resource.id or "").strip():
        raise ValidationError("Resource id is required.")

    missing = [
        label
        for label, value in (
            ("name", resource.name),
            ("type", resource.type),
            ("course", resource.course),
            ("description", resource.description),
        )
        if not str(value or "").strip()
    ]
    if not resource.year:
        missing.append("year")
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if resource.type not in RESOURCE_TYPES:
        raise ValidationError(f"Unknown resource type: {resource.type}")
    if isinstance(resource.year, bool) or not isinstance(resource.year, int) or resource.year <= 0:
        raise ValidationError(f"Year must be a positive whole number, got: {resource.year!r}")

    file_fields = (
        resource.file_url,
        resource.file_name,
        resource.file_mime_type,
        resource.file_size_bytes,
    )
    if any(value is not None for value in file_fields) and not resource.has_file:
        raise ValidationError("A file attachment needs both a file URL and a file name.")
