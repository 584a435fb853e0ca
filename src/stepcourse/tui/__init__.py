"""Reproductor de consola."""
