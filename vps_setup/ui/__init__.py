"""
Interactive menu shell.
"""
