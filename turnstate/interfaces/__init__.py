"""
Shared type aliases used across the runtime.
"""
