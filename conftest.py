"""Conftest.py (root-level).

We keep this in root pytest fixtures in pytest's doctest plugin to be available, as well
as avoiding conftest.py from being included in the wheel, in addition to pytest_plugin
for pytester only being available via the root directory.

See "pytest_plugins in non-top-level conftest files" in
https://docs.pytest.org/en/stable/deprecations.html
"""

from __future__ import annotations

import typing as t

import pytest
from _pytest.doctest import DoctestItem

from testcommand.tester import CommandTester, set_default_tester

if t.TYPE_CHECKING:
    from collections.abc import Generator

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
) -> Generator[None, None, None]:
    """Give every doctest its own default tester."""
    if not isinstance(request._pyfuncitem, DoctestItem):
        yield
        return

    tester = CommandTester()
    previous = set_default_tester(tester)
    doctest_namespace["tester"] = tester
    yield
    set_default_tester(previous)
