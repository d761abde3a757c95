"""Storage, AI gateway and instrumentation."""
