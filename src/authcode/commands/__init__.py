"""CLI sub-command groups for authcode.

Each module defines a Typer sub-app that :mod:`authcode.app` mounts on the
root application.
"""
