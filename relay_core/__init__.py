"""
Relay Station Manager core package
中转站管理核心模块
"""

__version__ = "0.1.0"
