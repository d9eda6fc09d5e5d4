"""HBase client core: configuration, errors, types, resource scope and service."""
