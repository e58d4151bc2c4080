"""catalog/ -- Product list and key-value settings for the product catalog.

Layer rule: catalog/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/, web/, or auth/.
"""
