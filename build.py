#!/usr/bin/env python3
"""
Build script for deployment.
Creates the database tables when DATABASE_URL is configured.
"""

from app import create_app, init_database


def initialize_database():
    """Initialize database for production deployment."""
    app = create_app()
    init_database(app)


if __name__ == "__main__":
    initialize_database()
