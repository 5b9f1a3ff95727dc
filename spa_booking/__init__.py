"""Spa reservation scheduling backend."""
