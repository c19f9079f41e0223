"""
Open Douban

Movie metadata provider backed by an Open Douban compatible API.
"""

__version__ = "1.0.0"
