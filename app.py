#!/usr/bin/env python
"""
Main application entry point for the Gym Club Management API.
"""
from gym_api import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000)
