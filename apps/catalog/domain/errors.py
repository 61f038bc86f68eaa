from __future__ import annotations


class CatalogDomainError(ValueError):
    pass


class CatalogValidationError(CatalogDomainError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class CategoryNotFoundError(CatalogDomainError):
    def __init__(self, message: str = "Category not found"):
        super().__init__(message)


class ProductNotFoundError(CatalogDomainError):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class DuplicateCategoryError(CatalogValidationError):
    def __init__(self, message: str = "Category with this name already exists"):
        super().__init__(message, field="name")


class CategoryInUseError(CatalogDomainError):
    def __init__(self, message: str, *, product_count: int = 0, subcategory_count: int = 0):
        super().__init__(message)
        self.product_count = product_count
        self.subcategory_count = subcategory_count
