"""Input service: accepts a CEP and relays it to the enrichment service."""
