"""
Page-access capability.

Protocols describing the loaded page, plus a BeautifulSoup implementation.
"""

from platform_extract.dom.base import PageDocument, PageElement
from platform_extract.dom.soup import SoupDocument, SoupElement

__all__ = [
    "PageDocument",
    "PageElement",
    "SoupDocument",
    "SoupElement",
]
