"""
Framing Tool Package

Order generator for a custom picture-framing shop.
Prices a framing configuration (readymade, glass, mat, printing, mount,
extras, moulding and labour), builds a multi-line order and submits it
to Shopify.
"""

__version__ = "1.0.0"
