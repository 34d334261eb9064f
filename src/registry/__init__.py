"""Package pools answering version lookups."""
