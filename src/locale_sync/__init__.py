"""
locale-sync: keep locale JSON files in sync using machine translation
"""

__version__ = '0.1.0'
