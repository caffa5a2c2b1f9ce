"""
UI package for the Formation Board.

This package contains the Flask web server exposing the formation board API.
"""
from .web_app import create_app, run_web_app

__all__ = ["create_app", "run_web_app"]
