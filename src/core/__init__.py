"""Core domain package for areablock.

Core contains number parsing, the policy model, call-blocking enumeration
and message classification without any storage or host-specific code.
"""
