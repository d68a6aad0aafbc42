"""Core verification engine: audits, diffing, version resolution, checks."""
