"""
Custom exceptions for MDB_DOCS.

Errors raised by the driver itself (network failures, permission denials,
quota exhaustion) are not translated: they propagate as the
``pymongo.errors.PyMongoError`` subclasses the driver raises.
"""

from typing import Any, Dict, Optional


class DocumentStoreError(RuntimeError):
    """
    Base exception for document store errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection_name,
                 document_id, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ConfigurationError(DocumentStoreError):
    """
    Raised when configuration is invalid, missing, or applied twice.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class InitializationError(DocumentStoreError):
    """
    Raised when the connection to the database cannot be established.

    Attributes:
        message: Error message
        mongo_uri: MongoDB connection URI (if available)
        db_name: Database name (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if mongo_uri:
            context["mongo_uri"] = mongo_uri
        if db_name:
            context["db_name"] = db_name
        super().__init__(message, context=context)
        self.mongo_uri = mongo_uri
        self.db_name = db_name


class QueryConditionError(DocumentStoreError, ValueError):
    """
    Raised when a query condition or paging argument is malformed.

    Attributes:
        message: Error message
        condition: The offending condition or argument (if available)
    """

    def __init__(
        self,
        message: str,
        condition: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if condition is not None:
            context["condition"] = condition
        super().__init__(message, context=context)
        self.condition = condition


class DocumentNotFoundError(DocumentStoreError):
    """Raised when an operation requires a document that does not exist."""

    def __init__(
        self,
        message: str = "not exist document",
        collection_name: Optional[str] = None,
        document_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if collection_name:
            context["collection_name"] = collection_name
        if document_id:
            context["document_id"] = document_id
        super().__init__(message, context=context)
        self.collection_name = collection_name
        self.document_id = document_id


class PartialMoveError(DocumentStoreError):
    """
    Raised when a non-transactional move inserted the copy but failed to
    delete the source.

    Both documents exist afterwards. ``new_document_id`` identifies the copy
    in the destination collection so the caller can delete it or retry the
    source deletion.
    """

    def __init__(
        self,
        message: str,
        from_collection: str,
        to_collection: str,
        document_id: str,
        new_document_id: str,
    ) -> None:
        super().__init__(
            message,
            context={
                "from_collection": from_collection,
                "to_collection": to_collection,
                "document_id": document_id,
                "new_document_id": new_document_id,
            },
        )
        self.from_collection = from_collection
        self.to_collection = to_collection
        self.document_id = document_id
        self.new_document_id = new_document_id
