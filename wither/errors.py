"""Error types raised by model and migration operations."""

from __future__ import annotations


class WitherError(Exception):
    """Base class of every error raised by this package."""


class _CauseError(WitherError):
    """An error that wraps an error raised by a lower layer."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.__cause__ = cause


class MongoError(_CauseError):
    """An error from the underlying MongoDB driver."""


class BsonError(_CauseError):
    """An error from BSON encoding, decoding or ObjectId handling."""


class _FixedMessageError(WitherError):
    default_message = ""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class ModelIdRequiredForOperation(_FixedMessageError):
    """The requested operation needs a model that already has an ObjectId."""

    default_message = "Model must have an ObjectId for this operation."


class ModelSerToDocument(WitherError):
    """A model serialized to something other than a BSON document."""

    def __init__(self, element_type: str) -> None:
        super().__init__(
            "Serializing model to BSON failed to produce a document, "
            f"got type {element_type}"
        )
        self.element_type = element_type


class ServerFailedToReturnUpdatedDoc(_FixedMessageError):
    """The server did not return a document after an update."""

    default_message = "Server failed to return the updated document. Update may have failed."


class ServerFailedToReturnObjectId(_FixedMessageError):
    """The server did not return the ObjectId of the written document."""

    default_message = "Server failed to return ObjectId of updated document."


class MigrationSetOrUnsetRequired(_FixedMessageError):
    """A migration defines neither a ``$set`` nor an ``$unset`` document."""

    default_message = "One of '$set' or '$unset' must be specified."