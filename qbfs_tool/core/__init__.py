"""
Core infrastructure.

Configuration, logging, and the exception taxonomy shared by every layer.
"""
