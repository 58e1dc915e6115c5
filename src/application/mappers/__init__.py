"""Mapper functions for application layer."""

from application.mappers.ipo_response_mapper import to_mutation_result, to_records_result

__all__ = ["to_mutation_result", "to_records_result"]
