"""
Core application engine.

This package contains the dependency resolver, which downloads a mod and
its transitive dependencies, and the parser that turns shell input into
commands.
"""
