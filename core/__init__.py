"""core/ -- Kernel of the E-Library API: configuration, errors, engine setup.

Layer rule: core/ imports only stdlib + third-party libraries. auth/,
catalog/ and api/ import from core/, never the other way around.
"""
