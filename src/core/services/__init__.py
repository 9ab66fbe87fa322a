"""Servicios del Core: sesión ServerQuery y orquestación del login."""
