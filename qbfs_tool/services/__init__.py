"""
Services.

Path resolution, metastore health probing, and mount table dumps.
"""
