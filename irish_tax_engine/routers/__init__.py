from .tax_engine import router as tax_router

__all__ = [
    'tax_router',
]
