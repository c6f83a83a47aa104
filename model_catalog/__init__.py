"""Model catalog: normalize AI-model metadata and evaluate saved filters against it."""

__version__ = "0.1.0"
