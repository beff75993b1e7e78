"""PRM order / SSS application entry bot"""

__version__ = "1.0.0"
