"""Command implementations for the tagwalk CLI."""

from .scan import ScanCommand, report_failures
from .checkpoint import cmd_list_checkpoints, cmd_cleanup_checkpoints, cmd_checkpoint_info
from .stats import cmd_show_stats
from .export import cmd_export_tracks

__all__ = [
    'ScanCommand',
    'report_failures',
    'cmd_list_checkpoints',
    'cmd_cleanup_checkpoints',
    'cmd_checkpoint_info',
    'cmd_show_stats',
    'cmd_export_tracks',
]
