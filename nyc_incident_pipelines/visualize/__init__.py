from .figures import render_figures

__all__ = ["render_figures"]
