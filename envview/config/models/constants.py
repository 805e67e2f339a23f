"""
Default values for configuration models.
"""

import os

DEFAULT_COMMENT_PREFIX = "//"
DEFAULT_TAG_NAMESPACE = "env"
DEFAULT_COMMENT_CHARS = "/#"
DEFAULT_LINE_TERMINATOR = os.linesep
DEFAULT_LOG_LEVEL = "INFO"

VALID_LINE_TERMINATORS = ("\n", "\r\n", "\r")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TRUE_VALUES = frozenset({"on", "true", "yes", "1"})
FALSE_VALUES = frozenset({"off", "false", "no", "0"})
