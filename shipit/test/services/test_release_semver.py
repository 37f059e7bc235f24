from __future__ import annotations

import pytest

from shipit.services.release.semver import ZERO, SemVer, latest_stable, parse_stable_tag


def test_parse_stable_tag() -> None:
    assert parse_stable_tag("v1.2.3") == SemVer(1, 2, 3)
    assert parse_stable_tag("v0.0.1") == SemVer(0, 0, 1)
    assert parse_stable_tag("release-2.0.0", prefix="release-") == SemVer(2, 0, 0)


def test_parse_stable_tag_rejects_other_tags() -> None:
    assert parse_stable_tag("v1.2.3-beta.1") is None
    assert parse_stable_tag("1.2.3") is None
    assert parse_stable_tag("v1.2") is None
    assert parse_stable_tag("vnext") is None
    assert parse_stable_tag("v01.2.3") is None


@pytest.mark.parametrize(
    ("kind", "expected"),
    [("patch", "v1.2.4"), ("minor", "v1.3.0"), ("major", "v2.0.0")],
)
def test_bump_from_v1_2_3(kind: str, expected: str) -> None:
    assert SemVer(1, 2, 3).bump(kind).to_tag() == expected  # type: ignore[arg-type]


def test_first_patch_release_from_zero() -> None:
    assert ZERO.to_tag() == "v0.0.0"
    assert ZERO.bump("patch").to_tag() == "v0.0.1"


def test_latest_stable_orders_numerically() -> None:
    tags = ["v1.9.0", "v1.10.0", "v1.2.30", "latest", "v2.0.0-beta.1"]
    assert latest_stable(tags) == ("v1.10.0", SemVer(1, 10, 0))


def test_latest_stable_none_when_no_version_tags() -> None:
    assert latest_stable([]) is None
    assert latest_stable(["latest", "vnext"]) is None
