"""Storefront cart and checkout orchestration service"""

__version__ = "1.0.0"
