"""
StockMeta - Stock metadata pipeline for Adobe Stock and Shutterstock.
"""

__version__ = "1.0.0"
