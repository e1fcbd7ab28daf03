"""Shared wiring: providers, tokenizer and telemetry."""
