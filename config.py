"""
Configuration settings for the Academic Report Engine
"""

import os


class Config:
    """Base configuration class"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'academic-reports-secret-key'

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///academic_reports.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Report settings
    REPORT_MAX_SEMESTERS = int(os.environ.get('REPORT_MAX_SEMESTERS') or 10)
    REPORT_INSTITUTION_NAME = os.environ.get('REPORT_INSTITUTION_NAME') or 'Your Institution Name'
    REPORT_PAGE_MARGIN_MM = float(os.environ.get('REPORT_PAGE_MARGIN_MM') or 19)
    REPORT_ZIP_COMPRESSION_LEVEL = int(os.environ.get('REPORT_ZIP_COMPRESSION_LEVEL') or 9)
    # None keeps the built-in grade scale; a dict of symbol -> points replaces it
    REPORT_GRADE_POINTS = None


class TestConfig(Config):
    """Configuration used by the test suite"""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    LOG_LEVEL = 'WARNING'
