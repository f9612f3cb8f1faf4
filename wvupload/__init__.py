"""
Worldview Upload - build and publish Worldview to a web host.
"""

__version__ = "1.0.0"
