"""
Core - configuration, storage driver wrapper and error types
"""
