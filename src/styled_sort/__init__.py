"""
Styled Sort - keeps styled-component declarations in usage order
"""

__version__ = "1.0.0"
