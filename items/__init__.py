"""items/ -- Owner-scoped item inventory for Stockroom.

Layer rule: items/ imports only stdlib, third-party libraries and core/.
It never imports from auth/ -- callers pass the owner id in.
"""
