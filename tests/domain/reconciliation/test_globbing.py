from __future__ import annotations

import pytest

from rebootless.domain.reconciliation import MalformedPatternError, compile_glob
from rebootless.domain.reconciliation.globbing import glob_matches


@pytest.mark.parametrize(
    ("pattern", "value", "expected"),
    [
        ("/etc/motd", "/etc/motd", True),
        ("/etc/motd", "/etc/motd.bak", False),
        ("/etc/containers/*.conf", "/etc/containers/registries.conf", True),
        ("/etc/containers/*.conf", "/etc/containers/sub/registries.conf", False),
        ("/etc/*", "/etc/", True),
        ("/etc/host?", "/etc/hosts", True),
        ("/etc/host?", "/etc/host/", False),
        ("/etc/[ab].conf", "/etc/a.conf", True),
        ("/etc/[ab].conf", "/etc/c.conf", False),
        ("/etc/[^ab].conf", "/etc/c.conf", True),
        ("/etc/[!ab].conf", "/etc/a.conf", True),
        ("/etc/[!ab].conf", "/etc/!.conf", True),
        ("/etc/[!ab].conf", "/etc/c.conf", False),
        ("/etc/[a-c].conf", "/etc/b.conf", True),
        ("/etc/\\*.conf", "/etc/*.conf", True),
        ("/etc/\\*.conf", "/etc/x.conf", False),
        ("*.service", "crio.service", True),
        ("*.service", "crio.socket", False),
        ("a.b", "axb", False),
    ],
)
def test_glob_matching(pattern: str, value: str, expected: bool) -> None:
    assert glob_matches(compile_glob(pattern), value) is expected


@pytest.mark.parametrize(
    ("pattern", "reason"),
    [
        ("/etc/[abc", "unclosed character class"),
        ("/etc/[]", "empty character class"),
        ("/etc/foo\\", "trailing escape"),
        ("/etc/[z-a]", "reversed range"),
    ],
)
def test_malformed_patterns_are_rejected(pattern: str, reason: str) -> None:
    with pytest.raises(MalformedPatternError) as excinfo:
        compile_glob(pattern)

    assert excinfo.value.pattern == pattern
    assert excinfo.value.reason.startswith(reason)
