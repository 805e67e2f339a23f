"""
Command handlers for the envview CLI.
"""

from .show_cmd import run_show
from .edit_cmd import run_mode, run_set

__all__ = ["run_show", "run_set", "run_mode"]
