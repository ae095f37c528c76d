"""
Flare Network nodes - host-side glue for the Flare node pack.

- config/: environment-driven settings
- observability/: structured JSON logging
- cli/: local runner for a single node batch
"""
