from __future__ import annotations

from typing import Any, Optional


class CollectionException(Exception):
    """Base exception for collections"""
    pass


class BadMethodCallException(CollectionException, AttributeError):
    """Exception raised when a method is neither defined nor registered as a macro"""
    
    def __init__(self, method: str, receiver: type) -> None:
        self.method = method
        self.receiver = receiver
        
        super().__init__(f"Method {receiver.__name__}::{method} does not exist.")


class MissingKeyException(CollectionException, KeyError):
    """Exception raised when an item has no value for the requested key"""
    
    def __init__(self, key: Any, item: Any = None) -> None:
        self.key = key
        self.item = item
        
        super().__init__(f"Key `{key}` does not exist on item of type `{type(item).__name__}`.")
    
    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class InvalidArgumentException(CollectionException, ValueError):
    """Exception raised when an operation receives an unusable argument"""
    pass


class SerializationException(CollectionException):
    """Exception raised when collection contents cannot be encoded or decoded"""

    def __init__(self, format: str, previous: Optional[BaseException] = None, action: str = "encode") -> None:
        self.format = format
        self.previous = previous
        self.action = action

        reason = f": {previous}" if previous is not None else ""
        super().__init__(f"Unable to {action} collection as {format}{reason}")
