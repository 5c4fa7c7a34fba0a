"""
Command-line layer: the Typer app, the interactive shell and Rich output.
"""
