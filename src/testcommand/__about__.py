"""Metadata for testcommand package."""

from __future__ import annotations

__title__ = "testcommand"
__package_name__ = "testcommand"
__version__ = "0.1.0"
__description__ = "Test external commands (nearly) as easily as loaded modules"
__email__ = "dev@testcommand.invalid"
__author__ = "testcommand contributors"
__github__ = "https://github.com/testcommand/testcommand"
__docs__ = "https://github.com/testcommand/testcommand#readme"
__tracker__ = "https://github.com/testcommand/testcommand/issues"
__pypi__ = "https://pypi.org/project/testcommand/"
__license__ = "MIT"
__copyright__ = "Copyright 2026- testcommand contributors"
