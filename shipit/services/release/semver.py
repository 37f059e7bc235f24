from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shipit.services.release.model import BumpKind

_STABLE_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def to_tag(self, prefix: str = "v") -> str:
        return f"{prefix}{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: BumpKind) -> "SemVer":
        match kind:
            case "major":
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                return SemVer(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


ZERO = SemVer(0, 0, 0)


def parse_stable_tag(tag: str, prefix: str = "v") -> SemVer | None:
    """Parse `<prefix>MAJOR.MINOR.PATCH`; prereleases and other tags give None."""
    if not tag.startswith(prefix):
        return None
    m = _STABLE_RE.match(tag[len(prefix) :])
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def latest_stable(tags: Iterable[str], prefix: str = "v") -> tuple[str, SemVer] | None:
    """Highest version among tags, compared numerically (v1.10.0 > v1.9.0)."""
    best: tuple[str, SemVer] | None = None
    for tag in tags:
        version = parse_stable_tag(tag, prefix)
        if version is None:
            continue
        if best is None or version > best[1]:
            best = (tag, version)
    return best
