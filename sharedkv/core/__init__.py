"""Core Application Layer: the cache accessor contract.

Holds the CacheFacade, which validates input, derives namespaced keys,
encodes values and keeps operation analytics, and the value codec it uses.
"""
