"""
Project: Restaurant Directory (Foodie Finder)
Date: October 2025

Description:
Application configuration. Values come from the environment with
development-friendly defaults.
"""

import os
import secrets


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", secrets.token_hex(32))
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///restaurants.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "eventlet")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # simulated network latency, then how long the success screen stays up
    PAYMENT_PROCESSING_DELAY = float(os.environ.get("PAYMENT_PROCESSING_DELAY", "1.5"))
    PAYMENT_DISPLAY_DELAY = float(os.environ.get("PAYMENT_DISPLAY_DELAY", "3.0"))
    DEFAULT_RESERVATION_AMOUNT = os.environ.get("DEFAULT_RESERVATION_AMOUNT", "50.00")
    # dialogs still being edited after this many seconds are dismissed
    PAYMENT_IDLE_TIMEOUT = float(os.environ.get("PAYMENT_IDLE_TIMEOUT", "900"))
