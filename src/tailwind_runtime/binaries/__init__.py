"""Tailwind executable resolution, verification and caching."""
