"""Error taxonomy for storefront operations.

Every error carries a ``{field: [messages]}`` dict on ``.messages``, so handlers
raise them exactly like ``ValidationError`` and the API layer maps each class to
its own HTTP status. Not-found and forbidden keep their Protean bases so generic
Protean handlers still recognise them.
"""

from protean.exceptions import (
    InvalidOperationError,
    ObjectNotFoundError,
    ProteanExceptionWithMessage,
    ValidationError,
)


class NotFound(ProteanExceptionWithMessage, ObjectNotFoundError):
    """The entity is absent or not visible to the caller."""


class Forbidden(ProteanExceptionWithMessage, InvalidOperationError):
    """The caller is identified but does not own the entity."""


class OutOfStock(ValidationError):
    """The product has no stock, so no cart line can be created for it."""


class InvalidQuantity(ValidationError):
    """An explicit quantity falls outside ``[1, stock]``."""


class EmptyCart(ValidationError):
    """Checkout was attempted with no cart lines."""


class InvalidStatus(ValidationError):
    """A fulfillment status change is not allowed."""


class StorageFailure(ProteanExceptionWithMessage):
    """The backing store failed while persisting a multi-step change."""
