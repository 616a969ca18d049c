"""entity-store - schema-driven entity storage over HTTP"""

__version__ = "0.1.0"
