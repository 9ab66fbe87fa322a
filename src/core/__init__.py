"""Core: dominio, protocolo y servicios (sin sockets ni terminal)."""
