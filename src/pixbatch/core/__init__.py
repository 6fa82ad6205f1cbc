"""
Core pipeline stages.
"""
