"""Domain errors raised by the storefront services.

Every error belongs to one of four kinds (not found, invalid state, limit
exceeded, expired). The API layer maps the kind to an HTTP status code, so
handlers never build HTTP responses for domain failures themselves.
"""


class StorefrontError(Exception):
    """Base exception for all storefront domain errors."""

    pass


# ---------- KINDS ----------


class NotFoundError(StorefrontError):
    """An id, code or slug has no matching row."""

    entity = "Entity"

    def __init__(self, identifier=None):
        self.identifier = identifier
        msg = f"{self.entity} not found"
        if identifier is not None:
            msg = f"{self.entity} with id {identifier} not found"
        super().__init__(msg)


class InvalidStateError(StorefrontError):
    """The request conflicts with the current state of the data."""

    pass


class LimitExceededError(StorefrontError):
    """A usage cap has been reached."""

    pass


class ExpiredError(StorefrontError):
    """Something is past its expiry time."""

    pass


# ---------- NOT FOUND ----------


class UserNotFound(NotFoundError):
    entity = "User"


class CategoryNotFound(NotFoundError):
    entity = "Category"


class ProductNotFound(NotFoundError):
    entity = "Product"


class OrderNotFound(NotFoundError):
    entity = "Order"


class CartItemNotFound(NotFoundError):
    entity = "Cart item"


class ReviewNotFound(NotFoundError):
    entity = "Review"


class DownloadNotFound(NotFoundError):
    entity = "Download"


class BlogPostNotFound(NotFoundError):
    entity = "Blog post"


class SettingNotFound(NotFoundError):
    entity = "Setting"

    def __init__(self, key: str):
        self.identifier = key
        StorefrontError.__init__(self, f"Setting '{key}' not found")


class CouponNotFound(NotFoundError):
    entity = "Coupon"

    def __init__(self, code: str):
        self.identifier = code
        StorefrontError.__init__(self, f"Coupon '{code}' not found")


# ---------- COUPONS ----------


class CouponInactive(InvalidStateError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Coupon '{code}' is not active")


class CouponMinimumNotMet(InvalidStateError):
    def __init__(self, code: str, min_order_amount):
        self.code = code
        self.min_order_amount = min_order_amount
        super().__init__(
            f"Minimum order amount of {min_order_amount} required for coupon '{code}'"
        )


class InvalidCouponDefinition(InvalidStateError):
    def __init__(self, reason: str):
        super().__init__(f"Invalid coupon: {reason}")


class CouponExpired(ExpiredError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Coupon '{code}' has expired")


class CouponUsageLimitExceeded(LimitExceededError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Coupon '{code}' usage limit exceeded")


# ---------- DOWNLOADS ----------


class DownloadLimitExceeded(LimitExceededError):
    def __init__(self, download_id: int):
        self.download_id = download_id
        super().__init__(f"Download limit exceeded for download {download_id}")


class DownloadAccessDenied(InvalidStateError):
    def __init__(self, download_id: int):
        self.download_id = download_id
        super().__init__("Invalid download or access denied")


class DownloadTokenInvalid(InvalidStateError):
    def __init__(self):
        super().__init__("Download link is invalid or has expired")


# ---------- GENERIC ----------


class DuplicateValue(InvalidStateError):
    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"{field} '{value}' already exists")


class InvalidDateRange(InvalidStateError):
    def __init__(self, start, end):
        super().__init__(f"Start date {start} is after end date {end}")
