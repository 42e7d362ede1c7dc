"""
Project: Restaurant Directory (Foodie Finder)
Date: October 2025

Description:
Production entry point. Builds the app and runs it under Socket.IO.
"""

from app import create_app, socketio

app = create_app()

if __name__ == "__main__":
    # Runs with eventlet server automatically
    socketio.run(app, host="0.0.0.0", port=5013, debug=True)
