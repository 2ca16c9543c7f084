"""
Program Tracker
SQLAlchemy instance shared by all models.

Usage:
    from tracker.models import db
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
