"""
CLI command implementations for MingwKit.
"""
