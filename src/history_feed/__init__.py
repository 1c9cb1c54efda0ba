"""Browsing-history feed, visit analytics and per-page LLM chat."""
