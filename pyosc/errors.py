class OSCError(Exception):
    """Base class for everything pyosc raises."""


class ParseError(OSCError):
    """An osmChange document could not be turned into a Change."""


class FormatError(ParseError):
    """The input bytes are not a well-formed osmChange document."""


class TransportError(ParseError):
    """The byte source failed before a document could be read.

    Whether to retry the read is up to the caller.
    """


class SerializeError(OSCError):
    """A Change could not be encoded or written out."""
