"""
Application Package

Command line entry point: parses arguments, loads the exchange
configuration and dispatches to the cache or read mode.
"""
