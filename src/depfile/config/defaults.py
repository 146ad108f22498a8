"""Starter .depfile.toml template."""

DEFAULT_TOML = """\
# depfile configuration
version = "1.0"

[files]
directory = "/"              # root-relative directory records are built under
max_file_size_kb = 1024
# support_patterns = ["*.lock", "go.sum"]   # loaded as support files, not update targets

[output]
format = "terminal"          # terminal | json | yaml
show_summary = true
"""
