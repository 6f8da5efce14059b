"""
SDV — Standards Document Validator

Checks that a semantically-tagged standards document (HTML) conforms to the
required macro-structure and publication metadata rules before it is
rendered and published.

Authors get every recoverable problem in one run. Fatal metadata problems
abort the run with a single reason.
"""

__version__ = "0.1.0"
__schema_version__ = "0.1.0"
