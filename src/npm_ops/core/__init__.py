"""Core npm execution logic."""
