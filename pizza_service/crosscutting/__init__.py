"""Crosscutting: config, logging, errores, middleware, paginación."""
