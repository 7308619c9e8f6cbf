#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Call Tree Tool 主入口
支持 python3 -m call_tree_tool 调用
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
