"""Ambient services: settings, logging, errors."""
