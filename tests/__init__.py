"""
Test suite for the platform extraction engine.

Covers text normalization, the selector cascade, single-item extraction,
both platform extractors, pacing, full-content resolution, configuration
and the CLI. Pages are static HTML fixtures parsed with BeautifulSoup.
"""
