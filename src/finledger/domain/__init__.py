"""Domain layer for finledger: entities, validation, aggregation and services."""
