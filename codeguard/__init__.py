"""CodeGuard: hybrid static + LLM source code security scanner."""

__version__ = "0.1.0"
