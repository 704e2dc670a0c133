"""Default configuration values and starter .sastmerge.toml template."""

DEFAULT_TOML = """\
# sastmerge configuration
version = "1.0"

[scan]
# ignore = ["node_modules/*", "vendor/*"]
workers = 4

[custom_rules]
# paths = [".sastmerge-rules"]   # YAML / JSON rule files or directories

[provenance]
enabled = false           # attach commit author (git log -L) to every finding

[output]
format = "terminal"       # terminal | json
show_summary = true

# Per-tool settings; `ignore = true` disables a tool entirely.
# [tools.scs]
# ignore = false
# image = "example/security-code-scan:latest"
"""
