"""Utility modules for Typepad.

This package provides helpers for logging, file and path handling, and text normalisation.
"""

from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils
from utils.path_helper import PathHelper, PathType
from utils.string_utils import StringUtils

__all__: list[str] = ["FileUtils", "LoggerUtils", "PathHelper", "PathType", "StringUtils"]
