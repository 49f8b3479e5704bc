from schemashift.utils import logging, text

__all__ = ("logging", "text")
