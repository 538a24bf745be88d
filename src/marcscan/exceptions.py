class MarcError(Exception):
    """Base class for every error raised by marcscan."""


class DecodeError(MarcError):
    """A record buffer could not be decoded into a Record."""

    def __init__(self, message: str, tag: str | None = None) -> None:
        self.tag = tag
        if tag is not None:
            message = f"{message} (tag {tag})"
        super().__init__(message)


class InvalidLeader(DecodeError):
    pass


class InvalidBaseAddress(DecodeError):
    pass


class MalformedDirectory(DecodeError):
    pass


class InvalidFieldLength(DecodeError):
    pass


class InvalidFieldStart(DecodeError):
    pass


class FieldOutOfBounds(DecodeError):
    pass


class InvalidIndicators(DecodeError):
    pass


class InvalidFieldText(DecodeError):
    pass


class EmptySubfield(DecodeError):
    pass


class FieldNotFound(MarcError, KeyError):
    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Field {tag} not found in record")

    def __str__(self) -> str:
        return self.args[0]


class InvalidQuery(MarcError, ValueError):
    pass
