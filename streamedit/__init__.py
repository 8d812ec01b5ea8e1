"""streamedit: stream model completions into live text documents."""

__version__ = "0.1.0"
