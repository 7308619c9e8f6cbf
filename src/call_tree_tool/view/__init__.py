"""
只读视图模型模块
"""

from .base import TreeTableModel
from .profile_model import ProfileModel
from .address_histogram_model import AddressHistogramModel

__all__ = ['TreeTableModel', 'ProfileModel', 'AddressHistogramModel']
