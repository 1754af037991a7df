# proptree/__init__.py
"""
proptree – turn ``key=value`` properties files into nested documents.

Import ``parse`` from ``proptree.hierarchical`` (dotted keys become nested
mappings) or from ``proptree.flat`` (keys kept as-is), or use
``PropertiesProcessor`` from ``proptree.processor`` to pick one from a
configuration mapping.
"""

__version__ = "0.1.0"
