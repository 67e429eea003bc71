"""
Shared utilities: logging, progress display and validation
"""
