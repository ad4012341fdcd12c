"""PEP 440-style version model with a total order.

Pre-release spellings (a, alpha, b, beta, c, rc, pre, preview) collapse to a
single numbered pre-release position. Ordering follows the comparison key
used by ``packaging``: release trailing zeros are ignored, a dev-only build
sorts before every pre-release of the same release, and a final release
sorts after its pre-releases and before its post-releases.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from ..errors import ParseError

_VERSION_RE = re.compile(
    r"""
    ^\s*v?
    (?:(?P<epoch>[0-9]+)!)?
    (?P<release>[0-9]+(?:\.[0-9]+)*)
    (?P<pre>
        [._-]?
        (?P<pre_l>alpha|a|beta|b|preview|pre|c|rc)
        [._-]?
        (?P<pre_n>[0-9]+)?
    )?
    (?P<post>
        (?:-(?P<post_n1>[0-9]+))
        |
        (?:
            [._-]?
            (?P<post_l>post|rev|r)
            [._-]?
            (?P<post_n2>[0-9]+)?
        )
    )?
    (?P<dev>
        [._-]?
        (?P<dev_l>dev)
        [._-]?
        (?P<dev_n>[0-9]+)?
    )?
    \s*$
    """,
    re.VERBOSE | re.IGNORECASE,
)

CompareKey = Tuple[int, Tuple[int, ...], Union[int, float], Union[int, float], Union[int, float]]


@dataclass(frozen=True, eq=False)
class Version:
    """Immutable version value; equality and order use ``compare_key``."""

    epoch: int = 0
    release: Tuple[int, ...] = (0,)
    pre_release: Optional[int] = None
    post_release: Optional[int] = None
    dev_release: Optional[int] = None

    def __post_init__(self) -> None:
        release = tuple(self.release)
        if not release:
            raise ValueError("release must contain at least one number")
        numbers = (self.epoch, *release) + tuple(
            n for n in (self.pre_release, self.post_release, self.dev_release) if n is not None
        )
        if any(n < 0 for n in numbers):
            raise ValueError("version numbers must be non-negative")
        object.__setattr__(self, "release", release)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse version text; raises ParseError on anything unrecognized."""
        if not isinstance(text, str):
            raise ParseError(repr(text), "version must be a string")
        match = _VERSION_RE.match(text)
        if match is None:
            raise ParseError(text, "not a valid version")

        pre = None
        if match.group("pre_l"):
            pre = int(match.group("pre_n") or 0)

        post = None
        if match.group("post_n1") is not None:
            post = int(match.group("post_n1"))
        elif match.group("post_l"):
            post = int(match.group("post_n2") or 0)

        dev = None
        if match.group("dev_l"):
            dev = int(match.group("dev_n") or 0)

        return cls(
            epoch=int(match.group("epoch") or 0),
            release=tuple(int(part) for part in match.group("release").split(".")),
            pre_release=pre,
            post_release=post,
            dev_release=dev,
        )

    @classmethod
    def lowest(cls) -> "Version":
        """The search floor: ``0`` with no epoch and no qualifiers."""
        return cls()

    def bump(self) -> "Version":
        """Increment the last release number, keeping epoch and qualifiers."""
        return replace(self, release=self.release[:-1] + (self.release[-1] + 1,))

    def prefix_floor(self) -> "Version":
        """Smallest version whose release starts with this one's release."""
        return Version(epoch=self.epoch, release=self.release, dev_release=0)

    @property
    def is_prerelease(self) -> bool:
        return self.pre_release is not None or self.dev_release is not None

    @property
    def is_postrelease(self) -> bool:
        return self.post_release is not None

    def compare_key(self) -> CompareKey:
        """Return ``(epoch, release, pre, post, dev)`` normalized for ordering."""
        release = self.release
        end = len(release)
        while end and release[end - 1] == 0:
            end -= 1
        normalized = release[:end]

        pre: Union[int, float]
        if self.pre_release is not None:
            pre = self.pre_release
        elif self.post_release is None and self.dev_release is not None:
            pre = -math.inf
        else:
            pre = math.inf

        post = self.post_release if self.post_release is not None else -math.inf
        dev = self.dev_release if self.dev_release is not None else math.inf
        return (self.epoch, normalized, pre, post, dev)

    def __str__(self) -> str:
        text = ".".join(str(n) for n in self.release)
        if self.epoch:
            text = f"{self.epoch}!{text}"
        if self.pre_release is not None:
            text += f".pre{self.pre_release}"
        if self.post_release is not None:
            text += f".post{self.post_release}"
        if self.dev_release is not None:
            text += f".dev{self.dev_release}"
        return text

    def __repr__(self) -> str:
        return f"<Version({str(self)!r})>"

    def __hash__(self) -> int:
        return hash(self.compare_key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_key() == other.compare_key()

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_key() != other.compare_key()

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_key() < other.compare_key()

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_key() <= other.compare_key()

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_key() > other.compare_key()

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare_key() >= other.compare_key()


def parse(text: str) -> Version:
    """Parse version text into a ``Version``."""
    return Version.parse(text)


def lowest() -> Version:
    """Return the lowest version, ``0``."""
    return Version.lowest()
