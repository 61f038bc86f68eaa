from __future__ import annotations


class OrderDomainError(ValueError):
    pass


class OrderValidationError(OrderDomainError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class OrderNotFoundError(OrderDomainError):
    def __init__(self, message: str = "Order not found"):
        super().__init__(message)


class OrderProductNotFoundError(OrderDomainError):
    def __init__(self, product_id):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class ProductUnavailableError(OrderDomainError):
    def __init__(self, product_name: str):
        super().__init__(f"Product is not available: {product_name}")


class InsufficientStockError(OrderDomainError):
    def __init__(self, *, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}, Requested: {requested}"
        )
        self.available = available
        self.requested = requested


class InvalidStatusError(OrderValidationError):
    def __init__(self, message: str):
        super().__init__(message, field="status")


class IllegalTransitionError(OrderDomainError):
    def __init__(self, message: str, *, current: str = "", target: str = ""):
        super().__init__(message)
        self.current = current
        self.target = target


class RefundRejectedError(OrderDomainError):
    pass


class OrderDeletionRejectedError(OrderDomainError):
    pass


class OrderNumberExhaustedError(OrderDomainError):
    pass
