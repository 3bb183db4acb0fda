"""
Exceptions for DocSeal
This is placed such that there is a general error catcher
"""


class DocSealError(Exception):
    # general container for errors
    pass


class SettingsError(DocSealError):
    # raised when the settings file cannot be read or is malformed
    pass


class KeyNotConfiguredError(DocSealError):
    # raised when a document op is attempted without an encryption key
    pass


class DocumentNotFoundError(DocSealError):
    # raised if a document DNE on disk
    pass


class EmptyDocumentError(DocSealError):
    # raised when sealing a zero-length document
    pass


class InvalidPathError(DocSealError):
    # raised when a path is outside the document directory
    pass


class SealConflictError(DocSealError):
    # raised when a document starts with the frame marker but does not open with the current key
    pass
