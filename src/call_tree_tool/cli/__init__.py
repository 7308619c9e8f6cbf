"""
CLI模块
"""
