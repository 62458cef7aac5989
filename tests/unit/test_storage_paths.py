from lurm.infrastructure.storage.paths import BucketSegmentPathResolver
from lurm.infrastructure.storage.store import BucketStore


def test_resolves_everything_after_bucket_segment() -> None:
    resolver = BucketSegmentPathResolver("resource-files")
    url = "https://project.example.co/storage/v1/object/public/resource-files/public/abc/notes.pdf"
    assert resolver.resolve_storage_path(url) == "public/abc/notes.pdf"


def test_decodes_percent_escapes_and_ignores_query() -> None:
    resolver = BucketSegmentPathResolver("resource-files")
    url = "http://127.0.0.1:8765/storage/v1/object/public/resource-files/public/abc/lecture%20notes.pdf?download=1"
    assert resolver.resolve_storage_path(url) == "public/abc/lecture notes.pdf"


def test_missing_bucket_segment_is_undetermined() -> None:
    resolver = BucketSegmentPathResolver("resource-files")
    assert resolver.resolve_storage_path("https://placehold.co/downloadable/PHY301_Quantum_Intro.pdf") is None
    assert resolver.resolve_storage_path("") is None


def test_bucket_as_last_segment_is_undetermined() -> None:
    resolver = BucketSegmentPathResolver("resource-files")
    assert resolver.resolve_storage_path("https://cdn.example.org/resource-files/") is None


def test_bucket_name_must_match_whole_segment() -> None:
    resolver = BucketSegmentPathResolver("resource-files")
    url = "https://cdn.example.org/old-resource-files/public/abc/notes.pdf"
    assert resolver.resolve_storage_path(url) is None


def test_parent_segments_are_rejected() -> None:
    resolver = BucketSegmentPathResolver("resource-files")
    url = "https://cdn.example.org/resource-files/public/../../secret.txt"
    assert resolver.resolve_storage_path(url) is None


def test_bucket_name_with_space_or_percent_is_matched_decoded() -> None:
    resolver = BucketSegmentPathResolver("course files")
    url = "https://cdn.example.org/storage/v1/object/public/course%20files/public/abc/a.pdf"
    assert resolver.resolve_storage_path(url) == "public/abc/a.pdf"

    resolver = BucketSegmentPathResolver("100%-notes")
    url = "https://cdn.example.org/storage/v1/object/public/100%25-notes/public/abc/a.pdf"
    assert resolver.resolve_storage_path(url) == "public/abc/a.pdf"


def test_resolves_urls_built_by_the_bucket_store(tmp_path) -> None:
    store = BucketStore(tmp_path, bucket="course files", public_base_url="http://127.0.0.1:8765")
    url = store.public_url_for("public/abc/week 1.pdf")

    assert BucketSegmentPathResolver("course files").resolve_storage_path(url) == "public/abc/week 1.pdf"
