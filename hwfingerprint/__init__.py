"""hwfingerprint: hardware fingerprint engine for Windows instances."""

AGENT_VERSION = "0.1.0"
