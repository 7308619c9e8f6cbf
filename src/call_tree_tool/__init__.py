"""
Call Tree Tool Package
"""

from .models import Event, EventKind, Frame
from .filter_state import FilterState
from .call_tree_builder import CallTreeBuilder, ProfileNode, build_call_tree
from .profile import Profile
from .parser import load_profile
from .exceptions import (ProfileLoadError, ProfileNotFoundError, CorruptProfileError,
                         UnresolvableImageError, InvalidTimestampRangeError)

__all__ = [
    'Event',
    'EventKind',
    'Frame',
    'FilterState',
    'CallTreeBuilder',
    'ProfileNode',
    'build_call_tree',
    'Profile',
    'load_profile',
    'ProfileLoadError',
    'ProfileNotFoundError',
    'CorruptProfileError',
    'UnresolvableImageError',
    'InvalidTimestampRangeError',
]
