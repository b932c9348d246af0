"""
This __init__.py file makes the 'commands' directory a Python package.

Each module defines a handler for one CLI command. Handlers take an
``args`` object (attributes named after the command's options) and return
a process exit code.
"""
