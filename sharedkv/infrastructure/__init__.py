"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the facade to the outside world (backend stores, trigger sources,
configuration files, console output) by implementing the interfaces defined
in the domain layer.
"""
