"""calclogic package: evaluation, formatting and graphing logic for a calculator."""

__all__ = [
    "config",
    "parser",
    "engine",
    "formatter",
    "sampler",
    "logic",
    "history",
    "display",
    "plotting",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "evaluate",
    "sample_curve",
    "configure_logging",
]
