"""Turn photographs of competitor promotions into a structured Word report."""

__version__ = "0.1.0"
