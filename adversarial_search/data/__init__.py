"""
Data Components for the Search Engine

This module provides chess-specific data, currently the table of named
opening lines that a match can replay before the searches take over.
"""

from .openings.openings import (
    OpeningDatabase,
    OpeningTemplate,
    create_opening_database
)

__all__ = [
    'OpeningDatabase',
    'OpeningTemplate',
    'create_opening_database'
]
