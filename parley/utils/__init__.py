"""
Utility package exports
"""

from parley.utils.helpers import excerpt, find_mentions, generate_handle

__all__ = ["excerpt", "find_mentions", "generate_handle"]
