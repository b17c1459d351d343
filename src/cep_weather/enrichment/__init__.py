"""Enrichment service: CEP -> locality -> current temperature."""
