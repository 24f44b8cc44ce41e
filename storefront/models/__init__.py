from storefront.models.page_document import PageDocumentRow, PageHistoryRow
from storefront.models.store import Store

__all__ = [
    "PageDocumentRow",
    "PageHistoryRow",
    "Store",
]
