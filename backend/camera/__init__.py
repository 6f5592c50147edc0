"""
Map cameras.

The fitting engine only borrows a camera through the `Camera` protocol; `MercatorCamera`
is the in-process implementation used by the HTTP surface and the tests.
"""
