"""Storage infrastructure: engine, schema, seeds, codec and the writer lock."""
