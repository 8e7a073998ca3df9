"""inlinewrite — inline LLM text transformation with cross-process configuration."""

__version__ = "0.1.0"
