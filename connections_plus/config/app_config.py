"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env
load_dotenv('connections_plus/config/config.env')


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Storage Settings
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'mongo')
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'connections_plus')
    MONGO_COLLECTION = os.getenv('MONGO_COLLECTION', 'kv')

    # Admin Access Settings
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')
    ADMIN_PASSWORD_HASH = os.getenv('ADMIN_PASSWORD_HASH')
    JWT_SECRET = os.getenv('JWT_SECRET')
    ADMIN_TOKEN_EXPIRATION_MINUTES = int(os.getenv('ADMIN_TOKEN_EXPIRATION_MINUTES', 60))

    # Word Generation Settings
    ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY')
    WORDGEN_MODEL = os.getenv('WORDGEN_MODEL', 'claude-3-5-sonnet-20241022')
    WORDGEN_MAX_TOKENS = int(os.getenv('WORDGEN_MAX_TOKENS', 100))

    # Gameplay Settings
    FINAL_REVEAL_DELAY_SECONDS = float(os.getenv('FINAL_REVEAL_DELAY_SECONDS', 1.5))
    BACKGROUND_TASKS = os.getenv('BACKGROUND_TASKS', 'True').lower() == 'true'

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORE_BACKEND = 'memory'
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'hunter22'
    ADMIN_PASSWORD_HASH = None
    JWT_SECRET = 'testing-jwt-secret'
    ANTHROPIC_API_KEY = None
    FINAL_REVEAL_DELAY_SECONDS = 0
    BACKGROUND_TASKS = False


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
