"""
Core module - Error codes, multi-tenancy resolution and store capabilities.
"""
