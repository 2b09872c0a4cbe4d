"""
Picture Organizer

Copies pictures and other media from input directories into a
year/month tree, skipping identical files and renaming clashing ones.
"""

__version__ = "1.0.0"
__author__ = "Homelab Team"

from .config import Config, ConfigError
from .scanner import DirectoryScanner, FileEntry
from .placement import DestinationBuilder, DestinationPath
from .duplicates import CollisionResolver, files_identical
from .validation import validate_file_name
from .organizer import DirectoryOrganizer, OutcomeRecord, ProcessingOutcome, Progress
from .runner import BackgroundRun
from .reporter import OrganizeReporter

__all__ = [
    'Config',
    'ConfigError',
    'DirectoryScanner',
    'FileEntry',
    'DestinationBuilder',
    'DestinationPath',
    'CollisionResolver',
    'files_identical',
    'validate_file_name',
    'DirectoryOrganizer',
    'OutcomeRecord',
    'ProcessingOutcome',
    'Progress',
    'BackgroundRun',
    'OrganizeReporter',
]
