"""Triage workflow, prompts and validation schemas."""
