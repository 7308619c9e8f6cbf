"""
CLI命令模块
"""

from .tree import TreeCommand
from .stats import StatsCommand
from .addresses import AddressesCommand

__all__ = ['TreeCommand', 'StatsCommand', 'AddressesCommand']
