#!/usr/bin/env python3
"""
Main entry point for the Formation Board web application.

This script launches the Flask-based API server.
"""
from formation_board.ui.web_app import run_web_app

if __name__ == "__main__":
    run_web_app()
