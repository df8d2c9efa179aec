"""CLI commands implementing the Command protocol.

Modules in this package are auto-discovered by the registry.
Each module exports a class that implements the Command protocol
(name, help, add_arguments, run).
"""
