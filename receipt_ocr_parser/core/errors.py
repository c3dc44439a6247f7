"""
Exception types raised outside the parsing core.

The field extractors never raise; these cover the OCR boundary, the LLM
refinement call and configuration.
"""


class ReceiptParserError(Exception):
    """Base class for all receipt parser errors."""


class NoTextFoundError(ReceiptParserError):
    """OCR produced too little text to be worth parsing."""


class UnsupportedFileError(ReceiptParserError, ValueError):
    """File extension is not an image, PDF or text transcript."""


class RefinementError(ReceiptParserError):
    """The LLM refinement call failed or returned an unusable reply."""


class ConfigurationError(ReceiptParserError, ValueError):
    """Invalid configuration value (e.g. unknown LLM provider)."""
