"""Trigger sources used to switch on read-bypass or flushing."""
