"""blog-sync: blog post export and git repository synchronization."""

__version__ = "0.1.0"
