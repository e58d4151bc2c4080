"""auth/ -- Registration and password login for the product catalog.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/, web/, or catalog/.
api/ imports from auth/, not the other way around.
"""
