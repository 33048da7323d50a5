"""Scanning engine modules."""
