"""
Jester — local-model code repair from the terminal.

Streams a fix for failing tests from an Ollama server and applies the
final fenced code block of the answer to the working source.
"""

__version__ = "1.0.0"
