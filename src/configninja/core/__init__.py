"""
Core modules for configninja.

- builder: file planning, reading, merging and environment overlays
- registry: per-id cache entries and the init/use/wipe lifecycle
- view: consumer views carrying the remote-control operations
- options, coercion, merge, persistence: helpers used by the builder
"""
