"""
Sprintcap – sprint detection and team capacity engine.
"""

__version__ = "1.0.0"
