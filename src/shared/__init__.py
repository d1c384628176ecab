"""Cross-context building blocks: configuration, logging, errors, money and persistence."""
