"""Starter .linesplit.toml template."""

CONFIG_FILENAME = ".linesplit.toml"

DEFAULT_TOML = """\
# linesplit configuration
version = "1.0"

[split]
max_lines = 6000          # maximum lines per segment file
segment_prefix = "file-"
index_width = 4           # file-0001, file-0002, ...
dir_marker = "-split"     # working set suffix; inputs containing it are skipped

[reassembly]
normalize_boundaries = true

[audit]
resync_window = 64        # lookahead (lines per side) when streams diverge
confirm_lines = 2
encoding = "utf-8"
sample_size = 20

[output]
format = "terminal"       # terminal | json
verbose = false           # echo every audit event
show_summary = true

[batch]
max_workers = 2
fail_on_mismatch = false  # exit 1 when any audit reports errors
"""
