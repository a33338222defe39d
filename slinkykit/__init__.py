"""Building blocks for cluster operators: pod and annotation helpers, keyed stores, slow-start batching, and revision history and pod control over an in-memory object store."""

__version__ = "0.4.0"