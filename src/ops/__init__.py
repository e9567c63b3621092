"""
Operational helpers: logging setup and the process-wide warnings channel.
"""
