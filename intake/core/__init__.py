# intake/core/__init__.py
"""
Configuration, logging and the error taxonomy shared by every layer.
"""
