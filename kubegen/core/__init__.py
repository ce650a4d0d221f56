"""Manifest generation pipeline."""
