"""
flowgen: natural-language to n8n workflow generator.

Turns an automation description into an importable n8n workflow through an
LLM, reviews it with a second advisory pass and keeps recent results and
conversations in a volatile store.
"""

__version__ = "0.1.0"
