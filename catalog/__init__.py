"""catalog/ -- Books, publishers and authors: domain dataclasses and the query layer.

Layer rule: catalog/ imports only stdlib, third-party libraries and core/.
"""
