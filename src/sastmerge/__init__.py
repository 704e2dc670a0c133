"""sastmerge — rule-driven normalization of static-analysis findings."""

__version__ = "0.1.0"
