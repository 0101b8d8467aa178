from __future__ import annotations

import pytest

from render.manifest import build_concat_manifest


def test_manifest_lists_each_slide_then_repeats_last() -> None:
    manifest = build_concat_manifest(["slide-0.png", "slide-1.png", "slide-2.png"], 40)
    assert manifest.splitlines() == [
        "file 'slide-0.png'",
        "duration 40",
        "file 'slide-1.png'",
        "duration 40",
        "file 'slide-2.png'",
        "duration 40",
        "file 'slide-2.png'",
    ]
    assert manifest.endswith("\n")


def test_single_slide_manifest() -> None:
    assert build_concat_manifest(["slide-0.png"], 240) == "file 'slide-0.png'\nduration 240\nfile 'slide-0.png'\n"


def test_quotes_in_names_are_escaped() -> None:
    manifest = build_concat_manifest(["it's.png"], 5)
    assert manifest.splitlines()[0] == "file 'it'\\''s.png'"


def test_empty_manifest_rejected() -> None:
    with pytest.raises(ValueError):
        build_concat_manifest([], 40)


def test_non_positive_duration_rejected() -> None:
    with pytest.raises(ValueError):
        build_concat_manifest(["slide-0.png"], 0)
