"""
CipherDash Shared Module
========================

Configuration, logging, console presentation, shared result models and
math helpers used by every CipherDash component.
"""

from dashcore.config import DashConfig, get_config

__all__ = ["DashConfig", "get_config"]
